"""Record-to-message conversion engine."""

from smsbackup.application.conversion.address_codec import encode_display_name, encode_local_part
from smsbackup.application.conversion.identity import IdentityGenerator, message_id
from smsbackup.application.conversion.message_builder import MessageBuilder
from smsbackup.application.conversion.person_resolver import PersonCache, PersonResolver
from smsbackup.application.conversion.pipeline import ConversionPipeline

__all__ = [
    "encode_local_part",
    "encode_display_name",
    "message_id",
    "IdentityGenerator",
    "PersonCache",
    "PersonResolver",
    "MessageBuilder",
    "ConversionPipeline",
]

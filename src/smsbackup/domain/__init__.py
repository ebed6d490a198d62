"""Domain models and entities."""

from smsbackup.domain.entities.person import Address, PersonRecord
from smsbackup.domain.entities.sms_message import (
    ConversionResult,
    Headers,
    MessageType,
    RawRecord,
    SmsField,
    StructuredMessage,
)
from smsbackup.domain.errors import SmsBackupError, StoreError

__all__ = [
    "Address",
    "PersonRecord",
    "RawRecord",
    "SmsField",
    "MessageType",
    "Headers",
    "StructuredMessage",
    "ConversionResult",
    "SmsBackupError",
    "StoreError",
]

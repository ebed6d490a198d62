"""Build one structured email message from one SMS record."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Callable, Optional

from loguru import logger

from smsbackup.application.conversion.address_codec import encode_local_part, one_line
from smsbackup.application.conversion.identity import IdentityGenerator, references
from smsbackup.domain.entities.person import Address, PersonRecord
from smsbackup.domain.entities.sms_message import (
    Headers,
    MessageType,
    RawRecord,
    SmsField,
    StructuredMessage,
)

UNKNOWN_PERSON = "unknown.person"
SUBJECT_TEMPLATE = "SMS with {}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _field(record: RawRecord, name: str) -> str:
    value = record.get(name)
    return "" if value is None else str(value)


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        return None


def unknown_person(address: str) -> PersonRecord:
    """Stand-in for an address the directory could not resolve."""
    return PersonRecord(
        external_id=address,
        display_name=address,
        address=Address(f"{encode_local_part(address)}@{UNKNOWN_PERSON}"),
    )


class MessageBuilder:
    def __init__(
        self,
        user_address: Address,
        identity: IdentityGenerator,
        mark_as_read: bool,
        version: str,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.user_address = user_address
        self.identity = identity
        self.mark_as_read = mark_as_read
        self.version = version
        self.clock = clock

    def build(self, record: RawRecord, person: Optional[PersonRecord]) -> StructuredMessage:
        address = _field(record, SmsField.ADDRESS).strip()
        if person is None:
            person = unknown_person(address)

        raw_type = _field(record, SmsField.TYPE)
        msg_type = _parse_int(raw_type)
        if msg_type is None:
            logger.warning(f"Record {record.get(SmsField.ID)!r}: unparsable type {raw_type!r}")

        if msg_type == MessageType.INBOX:
            sender, recipient = person.address, self.user_address
        else:
            sender, recipient = self.user_address, person.address

        headers: dict[str, str] = {}

        raw_date = _field(record, SmsField.DATE)
        millis = _parse_int(raw_date)
        sent_date = None
        if millis is not None:
            try:
                sent_date = datetime.fromtimestamp(millis // 1000, tz=timezone.utc)
                sent_date += timedelta(milliseconds=millis % 1000)
            except (OverflowError, OSError, ValueError):
                sent_date = millis = None
        if millis is None:
            logger.warning(f"Record {record.get(SmsField.ID)!r}: error parsing date {raw_date!r}")
        elif msg_type is not None:
            headers[Headers.MESSAGE_ID] = self.identity.message_id(millis, address, msg_type)

        # Thread by person rather than by thread id, which is less stable
        headers[Headers.REFERENCES] = one_line(references(self.identity.reference_token(), person.external_id))

        for header, name in Headers.FIELD_MAP.items():
            headers[header] = one_line(address if name == SmsField.ADDRESS else _field(record, name))
        headers[Headers.BACKUP_TIME] = format_datetime(self.clock(), usegmt=True)
        headers[Headers.VERSION] = self.version

        return StructuredMessage(
            subject=one_line(SUBJECT_TEMPLATE.format(person.display_name)),
            body=_field(record, SmsField.BODY),
            sender=sender,
            recipient=recipient,
            sent_date=sent_date,
            internal_date=sent_date,
            seen=self.mark_as_read,
            headers=headers,
        )

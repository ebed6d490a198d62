"""SMS records as read from the device and the messages built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Optional

from smsbackup.domain.entities.person import Address

# One row of the device SMS table, column name -> text value
RawRecord = Mapping[str, Optional[str]]

MESSAGE_ID_DOMAIN = "sms-backup-plus.local"
DEFAULT_MAX_SYNCED_DATE = -1


class SmsField:
    """Column names of a raw SMS record."""

    ID = "id"
    ADDRESS = "address"
    BODY = "body"
    TYPE = "type"
    DATE = "date"
    THREAD_ID = "thread_id"
    READ = "read"
    STATUS = "status"
    PROTOCOL = "protocol"
    SERVICE_CENTER = "service_center"

    ALL = (ID, ADDRESS, BODY, TYPE, DATE, THREAD_ID, READ, STATUS, PROTOCOL, SERVICE_CENTER)


class MessageType(IntEnum):
    """Values of the ``type`` column."""

    ALL = 0
    INBOX = 1
    SENT = 2
    DRAFT = 3
    OUTBOX = 4
    FAILED = 5
    QUEUED = 6


class Headers:
    """Header names written on every backed up message."""

    MESSAGE_ID = "Message-ID"
    REFERENCES = "References"

    ID = "X-smssync-id"
    ADDRESS = "X-smssync-address"
    TYPE = "X-smssync-type"
    DATE = "X-smssync-date"
    THREAD_ID = "X-smssync-thread"
    READ = "X-smssync-read"
    STATUS = "X-smssync-status"
    PROTOCOL = "X-smssync-protocol"
    SERVICE_CENTER = "X-smssync-service_center"
    BACKUP_TIME = "X-smssync-backup-time"
    VERSION = "X-smssync-version"

    # metadata header -> record field, in write order
    FIELD_MAP = {
        ID: SmsField.ID,
        ADDRESS: SmsField.ADDRESS,
        TYPE: SmsField.TYPE,
        DATE: SmsField.DATE,
        THREAD_ID: SmsField.THREAD_ID,
        READ: SmsField.READ,
        STATUS: SmsField.STATUS,
        PROTOCOL: SmsField.PROTOCOL,
        SERVICE_CENTER: SmsField.SERVICE_CENTER,
    }


@dataclass(frozen=True)
class StructuredMessage:
    subject: str
    body: str
    sender: Address
    recipient: Address
    sent_date: Optional[datetime]
    internal_date: Optional[datetime]
    seen: bool
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def message_id(self) -> Optional[str]:
        return self.headers.get(Headers.MESSAGE_ID)

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name)


@dataclass(frozen=True)
class ConversionResult:
    max_date: int
    messages: tuple[StructuredMessage, ...] = ()

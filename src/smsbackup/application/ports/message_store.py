from __future__ import annotations
from email.message import Message
from typing import Iterator, Protocol
from smsbackup.domain.entities.sms_message import StructuredMessage

class MessageStore(Protocol):
    def append(self, msg: StructuredMessage) -> str: ...
    def iter_messages(self) -> Iterator[Message]: ...

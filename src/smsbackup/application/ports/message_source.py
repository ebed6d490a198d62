from __future__ import annotations
from typing import Protocol
from smsbackup.domain.entities.sms_message import RawRecord

class MessageSource(Protocol):
    def fetch_since(self, max_date: int, limit: int = -1) -> list[RawRecord]: ...

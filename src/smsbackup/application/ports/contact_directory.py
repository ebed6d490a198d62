from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

@dataclass(frozen=True)
class DirectoryMatch:
    external_id: str
    display_name: Optional[str]
    matched_number: Optional[str] = None

class ContactDirectory(Protocol):
    def find_person(self, address: str) -> Optional[DirectoryMatch]: ...
    def list_emails(self, external_id: str) -> Sequence[str]: ...

from __future__ import annotations
from typing import Optional, Protocol

class PreferenceStore(Protocol):
    def get_reference_uid(self) -> Optional[str]: ...
    def set_reference_uid(self, value: str) -> None: ...
    def get_mark_as_read(self) -> bool: ...
    def get_mark_as_read_on_restore(self) -> bool: ...
    def get_version(self) -> str: ...
    def get_max_synced_date(self) -> int: ...
    def set_max_synced_date(self, value: int) -> None: ...
    def get_max_items_per_sync(self) -> int: ...
    def get_max_items_per_restore(self) -> int: ...
    def get_last_sync(self) -> int: ...
    def set_last_sync(self, value: int) -> None: ...

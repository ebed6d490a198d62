"""In-memory preference store for tests."""

from __future__ import annotations

from typing import Optional


class FakePreferenceStore:
    def __init__(
        self,
        reference_uid: Optional[str] = None,
        mark_as_read: bool = True,
        mark_as_read_on_restore: bool = True,
        version: str = "1.2.3",
        max_synced_date: int = -1,
        max_items_per_sync: int = -1,
        max_items_per_restore: int = -1,
    ):
        self.reference_uid = reference_uid
        self.mark_as_read = mark_as_read
        self.mark_as_read_on_restore = mark_as_read_on_restore
        self.version = version
        self.max_synced_date = max_synced_date
        self.max_items_per_sync = max_items_per_sync
        self.max_items_per_restore = max_items_per_restore
        self.last_sync = -1
        self.reference_writes = 0

    def get_reference_uid(self) -> Optional[str]:
        return self.reference_uid

    def set_reference_uid(self, value: str) -> None:
        self.reference_uid = value
        self.reference_writes += 1

    def get_mark_as_read(self) -> bool:
        return self.mark_as_read

    def get_mark_as_read_on_restore(self) -> bool:
        return self.mark_as_read_on_restore

    def get_version(self) -> str:
        return self.version

    def get_max_synced_date(self) -> int:
        return self.max_synced_date

    def set_max_synced_date(self, value: int) -> None:
        self.max_synced_date = value

    def get_max_items_per_sync(self) -> int:
        return self.max_items_per_sync

    def get_max_items_per_restore(self) -> int:
        return self.max_items_per_restore

    def get_last_sync(self) -> int:
        return self.last_sync

    def set_last_sync(self, value: int) -> None:
        self.last_sync = value

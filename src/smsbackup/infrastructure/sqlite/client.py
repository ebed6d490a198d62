"""SQLite-backed preference store (reference token, watermark, flags)."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from loguru import logger

from smsbackup.domain.entities.sms_message import DEFAULT_MAX_SYNCED_DATE

PREF_MAX_SYNCED_DATE = "max_synced_date"
PREF_REFERENCE_UID = "reference_uid"
PREF_MARK_AS_READ = "mark_as_read"
PREF_MARK_AS_READ_ON_RESTORE = "mark_as_read_on_restore"
PREF_MAX_ITEMS_PER_SYNC = "max_items_per_sync"
PREF_MAX_ITEMS_PER_RESTORE = "max_items_per_restore"
PREF_LAST_SYNC = "last_sync"

DEFAULT_MARK_AS_READ = True
DEFAULT_MARK_AS_READ_ON_RESTORE = True
DEFAULT_MAX_ITEMS_PER_SYNC = -1
DEFAULT_MAX_ITEMS_PER_RESTORE = -1
DEFAULT_LAST_SYNC = -1


class SQLitePreferenceStore:
    """Key/value preferences kept in a single SQLite table."""

    def __init__(
        self,
        db_path: str | Path,
        version: str,
        mark_as_read: bool = DEFAULT_MARK_AS_READ,
        mark_as_read_on_restore: bool = DEFAULT_MARK_AS_READ_ON_RESTORE,
        max_items_per_sync: int = DEFAULT_MAX_ITEMS_PER_SYNC,
        max_items_per_restore: int = DEFAULT_MAX_ITEMS_PER_RESTORE,
    ):
        self.db_path = Path(db_path)
        self.version = version
        # Used until the user stores an explicit value
        self._defaults = {
            PREF_MARK_AS_READ: mark_as_read,
            PREF_MARK_AS_READ_ON_RESTORE: mark_as_read_on_restore,
            PREF_MAX_ITEMS_PER_SYNC: max_items_per_sync,
            PREF_MAX_ITEMS_PER_RESTORE: max_items_per_restore,
        }
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connection() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS preferences (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
            """)
        logger.debug(f"Preference store initialized at {self.db_path}")

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        with self._connection() as conn:
            row = conn.execute("SELECT value FROM preferences WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute(
                """INSERT INTO preferences (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
                (key, value),
            )

    def _get_bool(self, key: str) -> bool:
        value = self.get(key)
        if value is None:
            return bool(self._defaults[key])
        return value.lower() in ("1", "true", "yes")

    def _get_int(self, key: str, default: int) -> int:
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Preference {key} holds non-integer {value!r}, using {default}")
            return default

    # Thread reference token

    def get_reference_uid(self) -> Optional[str]:
        return self.get(PREF_REFERENCE_UID)

    def set_reference_uid(self, value: str) -> None:
        self.set(PREF_REFERENCE_UID, value)

    # Flags

    def get_mark_as_read(self) -> bool:
        return self._get_bool(PREF_MARK_AS_READ)

    def set_mark_as_read(self, value: bool) -> None:
        self.set(PREF_MARK_AS_READ, "1" if value else "0")

    def get_mark_as_read_on_restore(self) -> bool:
        return self._get_bool(PREF_MARK_AS_READ_ON_RESTORE)

    def get_version(self) -> str:
        return self.version

    # Sync state

    def get_max_synced_date(self) -> int:
        return self._get_int(PREF_MAX_SYNCED_DATE, DEFAULT_MAX_SYNCED_DATE)

    def set_max_synced_date(self, value: int) -> None:
        self.set(PREF_MAX_SYNCED_DATE, str(value))
        logger.info(f"Saved max synced date {value}")

    def get_max_items_per_sync(self) -> int:
        return self._get_int(PREF_MAX_ITEMS_PER_SYNC, int(self._defaults[PREF_MAX_ITEMS_PER_SYNC]))

    def get_max_items_per_restore(self) -> int:
        return self._get_int(PREF_MAX_ITEMS_PER_RESTORE, int(self._defaults[PREF_MAX_ITEMS_PER_RESTORE]))

    def get_last_sync(self) -> int:
        """Epoch millis of the last successful backup, -1 if there was none."""
        return self._get_int(PREF_LAST_SYNC, DEFAULT_LAST_SYNC)

    def set_last_sync(self, value: int) -> None:
        self.set(PREF_LAST_SYNC, str(value))

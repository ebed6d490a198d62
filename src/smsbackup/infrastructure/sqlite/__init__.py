"""SQLite adapters."""

from smsbackup.infrastructure.sqlite.client import SQLitePreferenceStore
from smsbackup.infrastructure.sqlite.contacts import SQLiteContactDirectory
from smsbackup.infrastructure.sqlite.sms_source import SQLiteSmsSource

__all__ = ["SQLitePreferenceStore", "SQLiteContactDirectory", "SQLiteSmsSource"]

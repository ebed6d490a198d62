"""SMS reader for an Android-style ``sms`` table (mmssms.db export)."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from loguru import logger

from smsbackup.domain.entities.sms_message import RawRecord


def _row_val(row: sqlite3.Row, key: str) -> str | None:
    try:
        val = row[key]
    except (IndexError, KeyError):
        return None
    return None if val is None else str(val)


class SQLiteSmsSource:
    """Reads SMS rows newer than the sync watermark, oldest first."""

    COLUMNS = ("id", "address", "body", "type", "date", "thread_id", "read", "status", "protocol", "service_center")

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)

    def fetch_since(self, max_date: int, limit: int = -1) -> list[RawRecord]:
        if not self.db_path.exists():
            logger.warning(f"SMS database not found at {self.db_path}")
            return []

        conn = sqlite3.connect(f"{self.db_path.resolve().as_uri()}?mode=ro", uri=True)
        conn.row_factory = sqlite3.Row
        query = """
            SELECT
                _id AS id, address, body, type, date, thread_id,
                read, status, protocol, service_center
            FROM sms
            WHERE date > ?
            ORDER BY date
            LIMIT ?
        """
        try:
            rows = conn.execute(query, (max_date, limit)).fetchall()
        finally:
            conn.close()

        records = [{col: _row_val(row, col) for col in self.COLUMNS} for row in rows]
        logger.info(f"Read {len(records)} SMS newer than {max_date}")
        return records

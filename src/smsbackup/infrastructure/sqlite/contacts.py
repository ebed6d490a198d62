"""Contact directory read from a local SQLite address book.

Schema::

    people(id INTEGER PRIMARY KEY, name TEXT)
    phones(person_id INTEGER, number TEXT)
    emails(person_id INTEGER, address TEXT, position INTEGER)
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from loguru import logger

from smsbackup.application.ports.contact_directory import DirectoryMatch

SCHEMA = """
    CREATE TABLE IF NOT EXISTS people (
        id INTEGER PRIMARY KEY,
        name TEXT
    );

    CREATE TABLE IF NOT EXISTS phones (
        person_id INTEGER NOT NULL,
        number TEXT NOT NULL,
        FOREIGN KEY(person_id) REFERENCES people(id)
    );

    CREATE TABLE IF NOT EXISTS emails (
        person_id INTEGER NOT NULL,
        address TEXT NOT NULL,
        position INTEGER NOT NULL DEFAULT 0,
        FOREIGN KEY(person_id) REFERENCES people(id)
    );

    CREATE INDEX IF NOT EXISTS idx_phones_number ON phones(number);
    CREATE INDEX IF NOT EXISTS idx_emails_person ON emails(person_id, position);
"""


def normalize_number(number: str) -> str:
    """Digits only, keeping a leading + if present."""
    digits = "".join(c for c in number if c.isdigit())
    return f"+{digits}" if number.strip().startswith("+") else digits


class SQLiteContactDirectory:
    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._ensure_db()

    def _ensure_db(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connection() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _connection(self) -> Generator[sqlite3.Connection, None, None]:
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

    def add_person(self, name: str | None, numbers: list[str], emails: list[str] | None = None) -> int:
        """Insert a contact. Returns its id."""
        with self._connection() as conn:
            cursor = conn.execute("INSERT INTO people (name) VALUES (?)", (name,))
            person_id = cursor.lastrowid
            conn.executemany(
                "INSERT INTO phones (person_id, number) VALUES (?, ?)",
                [(person_id, n) for n in numbers],
            )
            conn.executemany(
                "INSERT INTO emails (person_id, address, position) VALUES (?, ?, ?)",
                [(person_id, e, i) for i, e in enumerate(emails or [])],
            )
        logger.debug(f"Added contact {person_id}: {name}")
        return person_id

    def find_person(self, address: str) -> Optional[DirectoryMatch]:
        if not address.strip():
            raise ValueError("empty address")

        with self._connection() as conn:
            row = conn.execute(
                """SELECT p.id, p.name, ph.number FROM phones ph
                   JOIN people p ON p.id = ph.person_id
                   WHERE ph.number = ?
                   ORDER BY p.id LIMIT 1""",
                (address,),
            ).fetchone()

            if row is None:
                wanted = normalize_number(address)
                if not wanted.lstrip("+"):
                    return None
                # Fall back to comparing digits, ignoring formatting
                for candidate in conn.execute(
                    """SELECT p.id, p.name, ph.number FROM phones ph
                       JOIN people p ON p.id = ph.person_id
                       ORDER BY p.id"""
                ):
                    if normalize_number(candidate["number"]) == wanted:
                        row = candidate
                        break

        if row is None:
            return None
        return DirectoryMatch(
            external_id=str(row["id"]),
            display_name=row["name"],
            matched_number=row["number"],
        )

    def list_emails(self, external_id: str) -> list[str]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT address FROM emails WHERE person_id = ? ORDER BY position, rowid",
                (external_id,),
            ).fetchall()
        return [r["address"] for r in rows]

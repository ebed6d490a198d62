"""Back up new SMS into the mail store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from smsbackup.application.conversion.message_builder import utcnow
from smsbackup.application.conversion.pipeline import ConversionPipeline
from smsbackup.application.ports.message_source import MessageSource
from smsbackup.application.ports.message_store import MessageStore
from smsbackup.application.ports.preference_store import PreferenceStore


@dataclass(frozen=True)
class BackupSummary:
    fetched: int
    stored: int
    previous_max_date: int
    max_date: int


class BackupSmsUseCase:
    """Back up SMS newer than the stored watermark.

    Flow:
    1. Read watermark and item limit from preferences
    2. Fetch at most that many newer records, oldest first
    3. Convert them
    4. Append every message to the store
    5. Save the new watermark and the time of this sync

    The watermark is only advanced after all messages were stored, so a
    failed run is retried from the same point. Message ids are stable and the
    store skips ids it already holds, so the retry does not duplicate what
    was already written.
    """

    def __init__(
        self,
        source: MessageSource,
        store: MessageStore,
        preferences: PreferenceStore,
        pipeline: ConversionPipeline,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.source = source
        self.store = store
        self.preferences = preferences
        self.pipeline = pipeline
        self.clock = clock

    def run(self, max_items: Optional[int] = None) -> BackupSummary:
        since = self.preferences.get_max_synced_date()
        limit = self.preferences.get_max_items_per_sync() if max_items is None else max_items

        records = self.source.fetch_since(since, limit)
        logger.info(f"Found {len(records)} SMS newer than {since}")

        result = self.pipeline.convert(records, limit)

        stored = 0
        for msg in result.messages:
            try:
                self.store.append(msg)
            except Exception as e:
                logger.error(f"Failed to store {msg.message_id or msg.subject}: {e}")
                raise
            stored += 1

        if result.max_date > since:
            self.preferences.set_max_synced_date(result.max_date)
        self.preferences.set_last_sync(int(self.clock().timestamp() * 1000))

        logger.info(f"Backed up {stored} of {len(records)} SMS")
        return BackupSummary(
            fetched=len(records),
            stored=stored,
            previous_max_date=since,
            max_date=max(result.max_date, since),
        )

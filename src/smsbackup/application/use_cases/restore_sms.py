"""Restore SMS records from backed up messages."""

from __future__ import annotations

from typing import Optional

from loguru import logger

from smsbackup.application.ports.message_store import MessageStore
from smsbackup.application.ports.preference_store import PreferenceStore
from smsbackup.domain.entities.sms_message import Headers, RawRecord, SmsField
from smsbackup.infrastructure.email.rfc822 import mime_to_record


class RestoreSmsUseCase:
    """Map stored messages back to SMS records.

    Messages without smssync headers are skipped, as are repeats of a
    Message-ID already restored in this run.
    """

    def __init__(self, store: MessageStore, preferences: PreferenceStore) -> None:
        self.store = store
        self.preferences = preferences
        self.mark_as_read = preferences.get_mark_as_read_on_restore()

    def run(self, max_items: Optional[int] = None) -> list[RawRecord]:
        if max_items is None:
            max_items = self.preferences.get_max_items_per_restore()
        records: list[RawRecord] = []
        seen_ids: set[str] = set()
        foreign = 0
        duplicates = 0

        for em in self.store.iter_messages():
            if 0 <= max_items <= len(records):
                break

            msg_id = em.get(Headers.MESSAGE_ID)
            if msg_id:
                msg_id = str(msg_id).strip()
                if msg_id in seen_ids:
                    duplicates += 1
                    continue

            record = mime_to_record(em)
            if record is None:
                foreign += 1
                continue

            if msg_id:
                seen_ids.add(msg_id)
            if self.mark_as_read:
                record = {**record, SmsField.READ: "1"}
            records.append(record)

        if foreign or duplicates:
            logger.info(f"Skipped {foreign} foreign and {duplicates} duplicate messages")
        logger.info(f"Restored {len(records)} SMS records")
        return records

"""Batch conversion of SMS records into structured messages."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Optional

from loguru import logger

from smsbackup.application.conversion.identity import IdentityGenerator
from smsbackup.application.conversion.message_builder import MessageBuilder, utcnow
from smsbackup.application.conversion.person_resolver import PersonCache, PersonResolver
from smsbackup.application.ports.contact_directory import ContactDirectory
from smsbackup.application.ports.preference_store import PreferenceStore
from smsbackup.domain.entities.person import Address
from smsbackup.domain.entities.sms_message import (
    DEFAULT_MAX_SYNCED_DATE,
    ConversionResult,
    RawRecord,
    SmsField,
    StructuredMessage,
)


def _record_date(record: RawRecord) -> Optional[int]:
    value = record.get(SmsField.DATE)
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class ConversionPipeline:
    """Converts batches of SMS records for one user.

    Owns the person cache and the thread reference token for its lifetime;
    create one per process and do not run two batches concurrently.
    """

    def __init__(
        self,
        user_email: str,
        directory: ContactDirectory,
        preferences: PreferenceStore,
        identity: Optional[IdentityGenerator] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.identity = identity or IdentityGenerator(preferences)
        # Token is fixed for the install before the first message uses it
        self.identity.reference_token()
        self.resolver = PersonResolver(directory)
        self.builder = MessageBuilder(
            user_address=Address(user_email),
            identity=self.identity,
            mark_as_read=preferences.get_mark_as_read(),
            version=preferences.get_version(),
            clock=clock,
        )

    @property
    def cache(self) -> PersonCache:
        return self.resolver.cache

    def convert(self, records: Iterable[RawRecord], max_entries: int = -1) -> ConversionResult:
        """Convert records in order, up to ``max_entries`` messages.

        Every record is scanned for the date watermark, including those past
        the cap. A negative ``max_entries`` means no cap.
        """
        messages: list[StructuredMessage] = []
        max_date = DEFAULT_MAX_SYNCED_DATE
        failed = 0

        for record in records:
            date = _record_date(record)
            if date is not None and date > max_date:
                max_date = date

            if 0 <= max_entries <= len(messages):
                continue

            msg = self._convert_one(record)
            if msg is None:
                failed += 1
            else:
                messages.append(msg)

        self.resolver.cache.trim()

        if failed:
            logger.warning(f"Skipped {failed} records that could not be converted")
        logger.info(f"Converted {len(messages)} messages (max date {max_date})")
        return ConversionResult(max_date=max_date, messages=tuple(messages))

    def _convert_one(self, record: RawRecord) -> Optional[StructuredMessage]:
        try:
            person = None
            address = record.get(SmsField.ADDRESS)
            if address is not None:
                address = str(address).strip()
                if address:
                    person = self.resolver.resolve(address)
            return self.builder.build(record, person)
        except Exception as e:
            logger.exception(f"Failed to convert record {record.get(SmsField.ID)!r}: {e}")
            return None

"""Tests for the backup and restore use cases."""

from __future__ import annotations

import mailbox
from email.message import EmailMessage
from pathlib import Path

import pytest

from smsbackup.application.conversion.pipeline import ConversionPipeline
from smsbackup.application.use_cases.backup_sms import BackupSmsUseCase
from smsbackup.application.use_cases.restore_sms import RestoreSmsUseCase
from smsbackup.domain.errors import StoreError
from smsbackup.infrastructure.email.rfc822 import to_bytes
from smsbackup.infrastructure.stores import MaildirMessageStore
from tests.fakes.fake_preferences import FakePreferenceStore
from tests.fakes.records import BACKUP_TIME, TOKEN, USER_EMAIL, fixed_clock, make_record


class ListSource:
    """Message source over an in-memory list, newest-after-watermark semantics."""

    def __init__(self, records: list[dict]):
        self.records = records
        self.calls: list[tuple[int, int]] = []

    def fetch_since(self, max_date: int, limit: int = -1) -> list[dict]:
        self.calls.append((max_date, limit))
        newer = sorted((r for r in self.records if int(r["date"]) > max_date), key=lambda r: int(r["date"]))
        return newer if limit < 0 else newer[:limit]


class BrokenStore:
    def append(self, msg) -> str:
        raise StoreError("disk full")

    def iter_messages(self):
        return iter(())


class FailingAfterStore:
    """Delegates to a real store but fails once ``limit`` appends succeeded."""

    def __init__(self, store: MaildirMessageStore, limit: int):
        self.store = store
        self.limit = limit
        self.appended = 0

    def append(self, msg) -> str:
        if self.appended >= self.limit:
            raise StoreError("connection dropped")
        self.appended += 1
        return self.store.append(msg)

    def iter_messages(self):
        return self.store.iter_messages()


@pytest.fixture
def records() -> list[dict]:
    return [
        make_record(id="1", address="555-0001", date="1000", body="one"),
        make_record(id="2", address="555-0002", date="2000", body="two", type="2"),
        make_record(id="3", address="555-1234", date="3000", body="three"),
    ]


def _backup(source, store, prefs, directory) -> BackupSmsUseCase:
    pipeline = ConversionPipeline(USER_EMAIL, directory, prefs, clock=fixed_clock)
    return BackupSmsUseCase(source=source, store=store, preferences=prefs, pipeline=pipeline, clock=fixed_clock)


def test_backup_stores_messages_and_advances_watermark(tmp_path: Path, records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN)
    store = MaildirMessageStore(tmp_path / "Maildir")

    summary = _backup(ListSource(records), store, prefs, directory).run()

    assert summary.fetched == 3
    assert summary.stored == 3
    assert summary.max_date == 3000
    assert prefs.max_synced_date == 3000
    assert prefs.last_sync == int(BACKUP_TIME.timestamp() * 1000)
    assert len(store) == 3


def test_second_backup_finds_nothing_new(tmp_path: Path, records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN)
    store = MaildirMessageStore(tmp_path / "Maildir")
    source = ListSource(records)
    _backup(source, store, prefs, directory).run()

    summary = _backup(source, store, prefs, directory).run()

    assert summary.stored == 0
    assert prefs.max_synced_date == 3000
    assert source.calls[-1] == (3000, -1)


def test_backup_respects_item_limit(tmp_path: Path, records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN, max_items_per_sync=2)
    store = MaildirMessageStore(tmp_path / "Maildir")
    source = ListSource(records)

    first = _backup(source, store, prefs, directory).run()
    second = _backup(source, store, prefs, directory).run()

    assert (first.stored, first.max_date) == (2, 2000)
    assert (second.stored, second.max_date) == (1, 3000)
    assert len(store) == 3


def test_failed_store_keeps_watermark(records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN, max_synced_date=500)

    with pytest.raises(StoreError):
        _backup(ListSource(records), BrokenStore(), prefs, directory).run()

    assert prefs.max_synced_date == 500
    assert prefs.last_sync == -1


def test_restore_round_trip(tmp_path: Path, records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN, mark_as_read_on_restore=False)
    store = MaildirMessageStore(tmp_path / "Maildir")
    _backup(ListSource(records), store, prefs, directory).run()

    restored = RestoreSmsUseCase(store, prefs).run()

    by_id = {r["id"]: r for r in restored}
    assert set(by_id) == {"1", "2", "3"}
    assert by_id["2"]["body"] == "two"
    assert by_id["2"]["type"] == "2"
    assert by_id["2"]["read"] == "0"


def test_restore_marks_read_and_skips_duplicates_and_foreign(tmp_path: Path, records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN)
    store = MaildirMessageStore(tmp_path / "Maildir")
    _backup(ListSource(records), store, prefs, directory).run()

    # Copies written by another client, bypassing the store
    folder = mailbox.Maildir(tmp_path / "Maildir", factory=None).get_folder("SMS")
    pipeline = ConversionPipeline(USER_EMAIL, directory, prefs, clock=fixed_clock)
    for msg in pipeline.convert(records).messages:
        folder.add(to_bytes(msg))
    foreign = EmailMessage()
    foreign["Subject"] = "not an sms"
    foreign.set_content("hello")
    folder.add(foreign)

    restored = RestoreSmsUseCase(store, prefs).run()

    assert len(store) == 7
    assert sorted(r["id"] for r in restored) == ["1", "2", "3"]
    assert all(r["read"] == "1" for r in restored)


def test_restore_limit(tmp_path: Path, records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN)
    store = MaildirMessageStore(tmp_path / "Maildir")
    _backup(ListSource(records), store, prefs, directory).run()

    assert len(RestoreSmsUseCase(store, prefs).run(max_items=2)) == 2


def test_restore_limit_defaults_to_preference(tmp_path: Path, records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN, max_items_per_restore=1)
    store = MaildirMessageStore(tmp_path / "Maildir")
    _backup(ListSource(records), store, prefs, directory).run()

    assert len(RestoreSmsUseCase(store, prefs).run()) == 1
    assert len(RestoreSmsUseCase(store, prefs).run(max_items=-1)) == 3


def test_retry_after_partial_failure_does_not_duplicate(tmp_path: Path, records, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN)
    store = MaildirMessageStore(tmp_path / "Maildir")

    with pytest.raises(StoreError):
        _backup(ListSource(records), FailingAfterStore(store, 2), prefs, directory).run()
    assert prefs.max_synced_date == -1
    assert len(store) == 2

    summary = _backup(ListSource(records), MaildirMessageStore(tmp_path / "Maildir"), prefs, directory).run()

    assert summary.max_date == 3000
    assert len(store) == 3
    ids = [em["Message-ID"] for em in store.iter_messages()]
    assert len(set(ids)) == 3


def test_line_breaks_in_a_field_do_not_block_backup(tmp_path: Path, directory) -> None:
    prefs = FakePreferenceStore(reference_uid=TOKEN)
    store = MaildirMessageStore(tmp_path / "Maildir")
    records = [
        make_record(id="1", date="1000", service_center="+1\r\nBcc: x@y"),
        make_record(id="2", date="2000"),
    ]

    summary = _backup(ListSource(records), store, prefs, directory).run()

    assert summary.stored == 2
    assert prefs.max_synced_date == 2000
    assert all(em["Bcc"] is None for em in store.iter_messages())

"""Tests for message ids and the thread reference token."""

from __future__ import annotations

import random
import re
import string

from smsbackup.application.conversion.identity import IdentityGenerator, message_id, references
from tests.fakes.fake_preferences import FakePreferenceStore

MSG_ID_RE = re.compile(r"<[0-9a-f]{32}@sms-backup-plus\.local>")


def test_message_id_known_value() -> None:
    # md5("1000" + "555-1234" + "1")
    assert message_id(1000, "555-1234", 1) == "<8de49cc1f3d1907c4f37be5ec13edbc3@sms-backup-plus.local>"


def test_message_id_is_deterministic() -> None:
    first = message_id(1_700_000_000_123, "+4915112345678", 2)
    assert first == message_id(1_700_000_000_123, "+4915112345678", 2)
    assert MSG_ID_RE.fullmatch(first)


def test_message_id_depends_on_every_part() -> None:
    base = message_id(1000, "555-1234", 1)
    assert message_id(1001, "555-1234", 1) != base
    assert message_id(1000, "555-1235", 1) != base
    assert message_id(1000, "555-1234", 2) != base


def test_message_id_handles_non_ascii_address() -> None:
    assert MSG_ID_RE.fullmatch(message_id(5, "Jörg", 1))


def test_references_format() -> None:
    assert references("tok", "42") == "<tok.42@sms-backup-plus.local>"


def test_reference_token_generated_and_persisted() -> None:
    prefs = FakePreferenceStore()
    token = IdentityGenerator(prefs, rng=random.Random(1)).reference_token()

    assert len(token) == 24
    assert set(token) <= set(string.digits + string.ascii_lowercase)
    assert prefs.reference_uid == token
    assert prefs.reference_writes == 1


def test_reference_token_is_reused() -> None:
    prefs = FakePreferenceStore()
    gen = IdentityGenerator(prefs)
    token = gen.reference_token()

    assert gen.reference_token() == token
    assert IdentityGenerator(prefs).reference_token() == token
    assert prefs.reference_writes == 1


def test_existing_reference_token_is_not_regenerated() -> None:
    prefs = FakePreferenceStore(reference_uid="persisted0000000000000000")
    assert IdentityGenerator(prefs).reference_token() == "persisted0000000000000000"
    assert prefs.reference_writes == 0

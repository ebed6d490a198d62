"""Shared pytest fixtures for smsbackup."""

import sys
from pathlib import Path

import pytest

# Make src/ importable without installing the package
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from smsbackup.application.conversion.pipeline import ConversionPipeline  # noqa: E402
from tests.fakes.fake_directory import FakeContact, FakeContactDirectory  # noqa: E402
from tests.fakes.fake_preferences import FakePreferenceStore  # noqa: E402
from tests.fakes.records import TOKEN, USER_EMAIL, fixed_clock  # noqa: E402


@pytest.fixture
def directory() -> FakeContactDirectory:
    return FakeContactDirectory([
        FakeContact("7", "Alice Smith", ["555-0001"], ["alice@work.org", "alice@gmail.com"]),
        FakeContact("8", "Bob", ["555-0002"], []),
    ])


@pytest.fixture
def preferences() -> FakePreferenceStore:
    return FakePreferenceStore(reference_uid=TOKEN)


@pytest.fixture
def pipeline(directory, preferences) -> ConversionPipeline:
    return ConversionPipeline(
        user_email=USER_EMAIL,
        directory=directory,
        preferences=preferences,
        clock=fixed_clock,
    )

"""Resolve SMS addresses to contacts, with a bounded cache."""

from __future__ import annotations

from typing import Optional, Sequence

from loguru import logger

from smsbackup.application.conversion.address_codec import encode_display_name, encode_local_part
from smsbackup.application.ports.contact_directory import ContactDirectory
from smsbackup.domain.entities.person import Address, PersonRecord

MAX_PEOPLE_CACHE_SIZE = 100

UNKNOWN_NUMBER = "unknown_number"
UNKNOWN_EMAIL = "unknown.email"
GMAIL_SUFFIXES = ("gmail.com", "googlemail.com")


def is_gmail_address(email: str) -> bool:
    return email.endswith(GMAIL_SUFFIXES)


def unknown_email(number: Optional[str]) -> str:
    no = UNKNOWN_NUMBER if number is None else number
    return f"{encode_local_part(no.strip())}@{UNKNOWN_EMAIL}"


def has_person_id(external_id: Optional[str]) -> bool:
    """Numeric directory ids start at 1; 0 or a negative id means no contact row."""
    if not external_id:
        return False
    try:
        return int(external_id) > 0
    except ValueError:
        return True


def choose_email(emails: Sequence[str]) -> Optional[str]:
    """First Gmail address if the person has one, else the first address."""
    for email in emails:
        if is_gmail_address(email):
            return email
    return emails[0] if emails else None


class PersonCache:
    """Address -> PersonRecord map, cleared wholesale once it grows too big."""

    def __init__(self, max_size: int = MAX_PEOPLE_CACHE_SIZE):
        self.max_size = max_size
        self._people: dict[str, PersonRecord] = {}

    def get(self, address: str) -> Optional[PersonRecord]:
        return self._people.get(address)

    def put(self, address: str, person: PersonRecord) -> None:
        self._people[address] = person

    def trim(self) -> bool:
        """Clear everything if over the limit. Returns True if cleared."""
        if len(self._people) > self.max_size:
            logger.debug(f"People cache holds {len(self._people)} entries, clearing")
            self._people.clear()
            return True
        return False

    def __len__(self) -> int:
        return len(self._people)

    def __contains__(self, address: object) -> bool:
        return address in self._people


class PersonResolver:
    def __init__(self, directory: ContactDirectory, cache: Optional[PersonCache] = None):
        self.directory = directory
        self.cache = cache if cache is not None else PersonCache()

    def resolve(self, address: str) -> Optional[PersonRecord]:
        """Look up the contact for a trimmed, non-empty address.

        Returns None when the directory knows nobody by that number. Misses
        are not cached so a contact added later is picked up on the next
        occurrence.
        """
        cached = self.cache.get(address)
        if cached is not None:
            return cached

        sanitized = address.replace("/", "")
        try:
            person = self._lookup(sanitized)
        except Exception as e:
            logger.error(f"Could not look up person for {sanitized!r}: {e}")
            return None

        if person is None:
            logger.debug(f"Looked up unknown address: {sanitized}")
            return None

        self.cache.put(address, person)
        return person

    def _lookup(self, sanitized: str) -> Optional[PersonRecord]:
        match = self.directory.find_person(sanitized)
        if match is None:
            return None

        email = None
        if has_person_id(match.external_id):
            email = choose_email(list(self.directory.list_emails(match.external_id)))
        if email is None:
            email = unknown_email(match.matched_number)

        return PersonRecord(
            external_id=str(match.external_id),
            display_name=match.display_name or sanitized,
            address=Address(email, encode_display_name(match.display_name)),
        )

"""Stable identifiers for backed up messages."""

from __future__ import annotations

import hashlib
import random
import string
from typing import Optional

from loguru import logger

from smsbackup.application.ports.preference_store import PreferenceStore
from smsbackup.domain.entities.sms_message import MESSAGE_ID_DOMAIN

MSG_ID_TEMPLATE = "<{}@" + MESSAGE_ID_DOMAIN + ">"
REFERENCE_UID_TEMPLATE = "<{}.{}@" + MESSAGE_ID_DOMAIN + ">"

REFERENCE_TOKEN_LENGTH = 24
REFERENCE_TOKEN_ALPHABET = string.digits + string.ascii_lowercase


def message_id(sent_time: int, address: str, msg_type: int) -> str:
    """Message-ID derived from date, address and type.

    The same triple always yields the same id, so converting a message twice
    does not create a duplicate on the mail store.
    """
    digest = hashlib.md5()
    digest.update(str(sent_time).encode("utf-8"))
    digest.update(address.encode("utf-8"))
    digest.update(str(msg_type).encode("utf-8"))
    return MSG_ID_TEMPLATE.format(digest.hexdigest())


def references(token: str, person_id: str) -> str:
    return REFERENCE_UID_TEMPLATE.format(token, person_id)


class IdentityGenerator:
    """Message ids plus the per-install thread reference token."""

    def __init__(self, preferences: PreferenceStore, rng: Optional[random.Random] = None):
        self.preferences = preferences
        self._rng = rng or random.Random()
        self._token: Optional[str] = None

    def message_id(self, sent_time: int, address: str, msg_type: int) -> str:
        return message_id(sent_time, address, msg_type)

    def reference_token(self) -> str:
        """Return the persisted token, creating and saving it on first use."""
        if self._token is None:
            token = self.preferences.get_reference_uid()
            if not token:
                token = "".join(
                    self._rng.choice(REFERENCE_TOKEN_ALPHABET)
                    for _ in range(REFERENCE_TOKEN_LENGTH)
                )
                self.preferences.set_reference_uid(token)
                logger.info("Generated new thread reference token")
            self._token = token
        return self._token

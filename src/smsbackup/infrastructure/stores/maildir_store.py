"""Maildir folder used as the local mail store for backups."""

from __future__ import annotations

import mailbox
from email import policy
from email.message import Message
from email.parser import BytesHeaderParser, BytesParser
from pathlib import Path
from typing import Iterator

from loguru import logger

from smsbackup.domain.entities.sms_message import Headers, StructuredMessage
from smsbackup.domain.errors import StoreError
from smsbackup.infrastructure.email.rfc822 import to_bytes

DEFAULT_FOLDER = "SMS"


class MaildirMessageStore:
    """Store backed up SMS in a Maildir sub-folder.

    Appending a message whose Message-ID is already in the folder is a no-op,
    so re-running a partly failed backup does not write duplicates.
    """

    def __init__(self, root: str | Path, folder: str = DEFAULT_FOLDER):
        self.root = Path(root)
        self.folder = folder
        self._box: mailbox.Maildir | None = None
        self._ids: dict[str, str] | None = None

    def _folder(self) -> mailbox.Maildir:
        if self._box is None:
            root = mailbox.Maildir(self.root, factory=None, create=True)
            if self.folder in root.list_folders():
                self._box = root.get_folder(self.folder)
            else:
                self._box = root.add_folder(self.folder)
                logger.info(f"Created folder: {self.folder}")
        return self._box

    def _index(self) -> dict[str, str]:
        """Message-ID -> Maildir key for everything already in the folder."""
        if self._ids is None:
            box = self._folder()
            parser = BytesHeaderParser()
            ids: dict[str, str] = {}
            for key in box.keys():
                try:
                    msg_id = parser.parsebytes(box.get_bytes(key)).get(Headers.MESSAGE_ID)
                except KeyError:
                    continue
                if msg_id:
                    ids.setdefault(str(msg_id).strip(), key)
            self._ids = ids
            logger.debug(f"Indexed {len(ids)} message ids in {self.folder}")
        return self._ids

    def append(self, msg: StructuredMessage) -> str:
        """Write one message unless its Message-ID is already stored.

        Returns the Maildir key of the stored copy.
        """
        msg_id = msg.message_id
        if msg_id is not None:
            existing = self._index().get(msg_id)
            if existing is not None:
                logger.debug(f"Already stored {msg_id} as {existing}")
                return existing

        mdmsg = mailbox.MaildirMessage(to_bytes(msg))
        mdmsg.set_subdir("cur")
        if msg.seen:
            mdmsg.add_flag("S")
        if msg.internal_date is not None:
            mdmsg.set_date(msg.internal_date.timestamp())
        try:
            key = self._folder().add(mdmsg)
        except OSError as e:
            raise StoreError(f"Cannot write to {self.root}/{self.folder}: {e}") from e

        if msg_id is not None:
            self._index()[msg_id] = key
        logger.debug(f"Stored {msg_id or msg.subject} as {key}")
        return key

    def iter_messages(self) -> Iterator[Message]:
        box = self._folder()
        parser = BytesParser(policy=policy.default)
        for key in sorted(box.keys()):
            try:
                yield parser.parsebytes(box.get_bytes(key))
            except KeyError:
                # Removed between listing and reading
                continue

    def __len__(self) -> int:
        return len(self._folder())

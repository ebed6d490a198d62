"""One-shot SMS backup from a device database export into a Maildir."""

from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from smsbackup.application.conversion.pipeline import ConversionPipeline
from smsbackup.application.use_cases.backup_sms import BackupSmsUseCase
from smsbackup.infrastructure.settings import get_settings
from smsbackup.infrastructure.sqlite import (
    SQLiteContactDirectory,
    SQLitePreferenceStore,
    SQLiteSmsSource,
)
from smsbackup.infrastructure.stores import MaildirMessageStore
from smsbackup.cli._logging import configure_logging


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Back up SMS into a Maildir folder")
    parser.add_argument("--sms-db", type=Path, default=None, help="Path to the mmssms.db export")
    parser.add_argument("--contacts-db", type=Path, default=None, help="Path to the contacts database")
    parser.add_argument("--maildir", type=Path, default=None, help="Maildir root to write to")
    parser.add_argument("--folder", default=settings.imap_folder, help="Maildir sub-folder")
    parser.add_argument("--user-email", default=settings.user_email, help="Address of the account owner")
    parser.add_argument("--max-items", type=int, default=None, help="Limit messages per run (-1 for no limit)")
    parser.add_argument("--reset", action="store_true", help="Forget the sync watermark and back up everything")
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    preferences = SQLitePreferenceStore(
        settings.preferences_db_path,
        version=settings.app_version,
        mark_as_read=settings.mark_as_read,
        mark_as_read_on_restore=settings.mark_as_read_on_restore,
        max_items_per_sync=settings.max_items_per_sync,
        max_items_per_restore=settings.max_items_per_restore,
    )
    if args.reset:
        preferences.set_max_synced_date(-1)

    source = SQLiteSmsSource(args.sms_db or settings.resolved_sms_db_path)
    directory = SQLiteContactDirectory(args.contacts_db or settings.resolved_contacts_db_path)
    store = MaildirMessageStore(args.maildir or settings.resolved_maildir_path, folder=args.folder)

    pipeline = ConversionPipeline(
        user_email=args.user_email,
        directory=directory,
        preferences=preferences,
    )
    uc = BackupSmsUseCase(source=source, store=store, preferences=preferences, pipeline=pipeline)

    try:
        summary = uc.run(max_items=args.max_items)
    except Exception as e:
        logger.error(f"Backup failed: {e}")
        return 1

    print(f"Backed up {summary.stored} of {summary.fetched} SMS to {store.root}/{store.folder}")
    print(f"Watermark: {summary.previous_max_date} -> {summary.max_date}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

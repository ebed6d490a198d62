"""Restore SMS records from a Maildir backup as JSON."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from smsbackup.application.use_cases.restore_sms import RestoreSmsUseCase
from smsbackup.infrastructure.settings import get_settings
from smsbackup.infrastructure.sqlite import SQLitePreferenceStore
from smsbackup.infrastructure.stores import MaildirMessageStore
from smsbackup.cli._logging import configure_logging


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Restore SMS records from a Maildir backup")
    parser.add_argument("--maildir", type=Path, default=None, help="Maildir root to read from")
    parser.add_argument("--folder", default=settings.imap_folder, help="Maildir sub-folder")
    parser.add_argument(
        "--max-items", type=int, default=None, help="Limit restored records (-1 for no limit, default from preferences)"
    )
    parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout")
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
    store = MaildirMessageStore(args.maildir or settings.resolved_maildir_path, folder=args.folder)

    try:
        records = RestoreSmsUseCase(store, preferences).run(max_items=args.max_items)
    except Exception as e:
        logger.error(f"Restore failed: {e}")
        return 1

    payload = json.dumps([dict(r) for r in records], indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        print(f"Restored {len(records)} SMS to {args.output}")
    else:
        sys.stdout.write(payload + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from smsbackup.infrastructure.stores.maildir_store import MaildirMessageStore

__all__ = ["MaildirMessageStore"]

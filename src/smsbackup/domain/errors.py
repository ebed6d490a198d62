"""Domain errors."""


class SmsBackupError(Exception):
    """Base class for errors raised by smsbackup."""


class StoreError(SmsBackupError):
    """The message store rejected a read or write."""

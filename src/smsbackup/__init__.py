"""SMS Backup - converts SMS records to MIME messages and back."""

__version__ = "0.1.0"

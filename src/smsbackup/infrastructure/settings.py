"""Application settings using Pydantic Settings for configuration management."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from smsbackup import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SMSBACKUP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    app_version: str = __version__
    log_level: str = "INFO"

    # Account the messages are backed up for
    user_email: str = "me@localhost"

    # Storage
    data_dir: Path = Path("~/.smsbackup").expanduser()
    sms_db_path: Path | None = None
    contacts_db_path: Path | None = None
    maildir_path: Path | None = None
    imap_folder: str = "SMS"

    # Defaults until stored in the preference database
    max_items_per_sync: int = Field(default=-1, description="-1 means no limit")
    max_items_per_restore: int = Field(default=-1, description="-1 means no limit")
    mark_as_read: bool = True
    mark_as_read_on_restore: bool = True

    @computed_field
    @property
    def preferences_db_path(self) -> Path:
        """Preference database location."""
        return self.data_dir / "preferences.db"

    @computed_field
    @property
    def resolved_sms_db_path(self) -> Path:
        return self.sms_db_path or self.data_dir / "mmssms.db"

    @computed_field
    @property
    def resolved_contacts_db_path(self) -> Path:
        return self.contacts_db_path or self.data_dir / "contacts.db"

    @computed_field
    @property
    def resolved_maildir_path(self) -> Path:
        return self.maildir_path or self.data_dir / "Maildir"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

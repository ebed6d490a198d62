"""Infrastructure layer - storage adapters, email rendering and configuration."""

from smsbackup.infrastructure.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]

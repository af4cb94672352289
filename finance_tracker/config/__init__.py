"""Configuration package."""

from finance_tracker.config.settings import (
    GoogleSheetsSettings,
    Settings,
    StorageBackend,
    TrackerSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "GoogleSheetsSettings",
    "Settings",
    "StorageBackend",
    "TrackerSettings",
    "get_settings",
    "validate_all_settings",
]

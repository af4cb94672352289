"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage backend selection and the alert thresholds used by the
derived-metric views are read once and validated at startup.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackend(str, Enum):
    """Where collection snapshots are persisted."""
    MEMORY = "memory"
    JSON = "json"
    GOOGLE_SHEETS = "google_sheets"


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets record store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # One row per collection lives in this worksheet
    store_sheet_name: str = Field(
        default="Store",
        description="Name of the sheet holding collection snapshots"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class TrackerSettings(BaseSettings):
    """
    Main tracker settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Persistence
    storage_backend: StorageBackend = Field(
        default=StorageBackend.JSON,
        description="Record store used for collection snapshots"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for JSON snapshot files"
    )

    # Alert thresholds
    upcoming_tax_days: int = Field(
        default=30,
        ge=0,
        le=366,
        description="Unpaid taxes due within this many days are upcoming"
    )
    due_soon_days: int = Field(
        default=7,
        ge=0,
        le=366,
        description="Items due within this many days are flagged as due soon"
    )

    # Validation thresholds
    max_reasonable_amount: float = Field(
        default=1000000.0,
        gt=0,
        description="Amounts above this are accepted but flagged as suspicious"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def tracker(self) -> TrackerSettings:
        return TrackerSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Google Sheets is only checked when it is the selected backend.
    """
    results = {}

    settings = get_settings()

    try:
        tracker = settings.tracker
        results["tracker"] = True
    except Exception as e:
        results["tracker"] = False
        results["tracker_error"] = str(e)
        return results

    if tracker.storage_backend == StorageBackend.GOOGLE_SHEETS:
        try:
            _ = settings.google_sheets
            results["google_sheets"] = True
        except Exception as e:
            results["google_sheets"] = False
            results["google_sheets_error"] = str(e)

    return results

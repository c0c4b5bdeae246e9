"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./pawcare.db",
        description="Database connection URL used by SQLAlchemy for the key/value storage",
        min_length=1,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone (or UTC offset such as UTC-05:00) used to render local times",
    )
    notifications_storage_key: str = Field(
        default="pawcare.notifications.v1",
        description="Storage key holding the serialized notification log",
        min_length=1,
    )
    notifications_dedupe_storage_key: str = Field(
        default="pawcare.notifications.dedupe.v1",
        description="Storage key holding the serialized dedupe registry",
        min_length=1,
    )
    max_notifications: int = Field(
        default=120,
        description="Maximum number of notifications kept in the log",
        gt=0,
    )
    max_dedupe_keys: int = Field(
        default=500,
        description="Maximum number of dedupe keys remembered",
        gt=0,
    )
    browser_notifications_enabled: bool = Field(
        default=True,
        description="Whether permission requests for browser alerts are granted",
    )
    browser_notification_icon: str = Field(
        default="/images/pawcare.png",
        description="Icon sent along with browser popups",
    )
    popup_close_after_seconds: int = Field(
        default=6,
        description="Seconds before a browser popup closes itself",
        gt=0,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    @model_validator(mode="after")
    def _validate_storage_keys(self) -> "Settings":
        if self.notifications_storage_key == self.notifications_dedupe_storage_key:
            raise ValueError(
                "NOTIFICATIONS_STORAGE_KEY and NOTIFICATIONS_DEDUPE_STORAGE_KEY must differ"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # MongoDB Configuration
    # ==========================================================================
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "caronas"
    mongodb_collection: str = "rides"

    # ==========================================================================
    # Telegram Bot Configuration
    # ==========================================================================
    telegram_bot_token: str = ""
    telegram_log_chat_id: str = ""  # Receives WARNING+ logs when set

    # ==========================================================================
    # Schedule Settings
    # ==========================================================================
    timezone: str = "America/Sao_Paulo"
    cleanup_interval_minutes: int = 10
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject unknown IANA zone names at startup instead of at render time."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("cleanup_interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        if value < 1:
            raise ValueError("CLEANUP_INTERVAL_MINUTES must be at least 1")
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        """Local timezone used to interpret and display ride times."""
        return ZoneInfo(self.timezone)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=False
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to avoid re-reading env vars on every call.
    """
    return Settings()

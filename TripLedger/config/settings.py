"""
Application configuration and environment settings.
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    # Application
    APP_NAME: str = "TripLedger"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Money
    SETTLEMENT_CURRENCY: str = "HKD"  # Currency all balances are expressed in
    DEFAULT_FX_RATE: float = 1.0  # Used when a trip carries no rate of its own

    @field_validator("SETTLEMENT_CURRENCY", mode="before")
    @classmethod
    def normalize_currency(cls, v):
        """Upper-case the currency code."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()

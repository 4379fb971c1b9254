"""
Front Office Configuration

Settings are read from SALON_* environment variables and an optional .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read .env by default (repo root). You can also export envs directly.
    model_config = SettingsConfigDict(
        env_prefix="SALON_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    BUSINESS_NAME: str = "Alicia Beauty Art"
    DEFAULT_TAX_PERCENT: float = 8.5
    DEFAULT_DISCOUNT_PERCENT: float = 0.0
    # Growth figures shown on the dashboard; left unset when no baseline is known
    REVENUE_GROWTH: Optional[float] = None
    CUSTOMER_GROWTH: Optional[float] = None
    RECENT_APPOINTMENTS_LIMIT: int = 5
    REVENUE_CHART_DAYS: int = 7
    SEED_DEMO_DATA: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator("DEFAULT_TAX_PERCENT")
    @classmethod
    def validate_tax(cls, value: float) -> float:
        if not (0.0 <= value <= 50.0):
            raise ValueError("DEFAULT_TAX_PERCENT must be between 0 and 50")
        return value

    @field_validator("DEFAULT_DISCOUNT_PERCENT")
    @classmethod
    def validate_discount(cls, value: float) -> float:
        if not (0.0 <= value <= 100.0):
            raise ValueError("DEFAULT_DISCOUNT_PERCENT must be between 0 and 100")
        return value

    @field_validator("RECENT_APPOINTMENTS_LIMIT", "REVENUE_CHART_DAYS")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Get the process-wide settings instance"""
    return Settings()

"""Application configuration."""

from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from juris_calc.core.durations import DEFAULT_TIMEZONE


class Settings(BaseSettings):
    """Environment-driven settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    timezone: str = DEFAULT_TIMEZONE
    include_release_day: bool = False
    alimony_penalty_rate: Decimal = Decimal("0.02")
    alimony_monthly_interest_rate: Decimal = Decimal("0.01")
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()

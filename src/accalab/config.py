"""Environment-driven configuration helpers for AccaLab."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    probability_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    price_low: int = Field(default=100)
    price_high: int = Field(default=1000)
    min_selections: int = Field(default=2, ge=2)
    max_selections: int = Field(default=4, ge=2, le=10)

    odds_api_key: str = Field(default="", validation_alias="ODDS_API_KEY")
    odds_api_base_url: str = Field(default="https://api.the-odds-api.com/v4")
    odds_api_regions: str = Field(default="us")
    odds_api_markets: str = Field(default="h2h")
    odds_api_min_interval_seconds: float = Field(default=1.0, ge=0.0)
    odds_api_monthly_limit: int = Field(default=500, ge=0, description="0 disables the budget")
    default_sport: str = Field(default="soccer_epl")

    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]


"""Application configuration."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Market data providers
    coingecko_base_url: str = "https://api.coingecko.com"
    coingecko_api_key: str = ""  # Optional demo key, sent as x-cg-demo-api-key
    binance_base_url: str = "https://api.binance.com"
    binance_calls_per_minute: int = Field(1200, gt=0)
    http_timeout: float = 10.0

    # Scan parameters
    universe_limit: int = 50
    candle_interval: str = "1h"
    candle_limit: int = 210
    max_concurrency: int = 10  # Parallel candle fetches
    asset_timeout: float = 15.0  # Seconds per asset before "connection error"

    # Optional YAML file overriding strategy thresholds and the denylist
    profile_path: str = ""

    # Scheduler (CLI loop)
    scan_interval: float = 60.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

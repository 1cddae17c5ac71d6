"""Environment-driven defaults loaded from PATTERN_PRO_* variables or .env."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"

    # Data source defaults
    default_source: str = "csv"
    default_exchange: str = "binance"
    default_symbol: str = "BTC/USDT"
    default_timeframe: str = "1d"
    default_limit: int = 120

    # Exchange credentials (optional, via .env)
    exchange_api_key: str = ""
    exchange_secret: str = ""

    # Output
    output_dir: str = "output"

    # Multi-symbol scans
    scan_max_workers: int = 4

    model_config = SettingsConfigDict(
        env_prefix="PATTERN_PRO_", env_file=".env", env_file_encoding="utf-8", extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()

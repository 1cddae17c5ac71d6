"""
Configuration / Settings for Pattern Detection Pro.
Groups the CLI run parameters; defaults come from the environment.
"""

from dataclasses import dataclass, field
from typing import List

from .settings import Settings, get_settings


@dataclass
class DataSettings:
    """Data source configuration."""
    source: str = "csv"           # "csv" or "ccxt"
    file_path: str = ""           # CSV file path
    exchange: str = "binance"     # ccxt exchange id
    symbols: List[str] = field(default_factory=lambda: ["BTC/USDT"])
    timeframe: str = "1d"
    limit: int = 120
    api_key: str = ""
    secret: str = ""

    @property
    def symbol(self) -> str:
        return self.symbols[0] if self.symbols else ""


@dataclass
class ScanSettings:
    """Multi-symbol scan settings."""
    max_workers: int = 4


@dataclass
class OutputSettings:
    """Report output options."""
    show_chart: bool = False
    save_chart: str = ""          # path to save chart image
    save_report: bool = False     # save report to JSON
    list_reports: bool = False    # list saved reports instead of scanning
    output_dir: str = "output"


@dataclass
class AppConfig:
    """Root configuration aggregating all settings."""
    data: DataSettings = field(default_factory=DataSettings)
    scan: ScanSettings = field(default_factory=ScanSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    log_level: str = "INFO"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppConfig":
        """Build a config seeded with environment defaults."""
        return cls(
            data=DataSettings(
                source=settings.default_source,
                exchange=settings.default_exchange,
                symbols=[settings.default_symbol],
                timeframe=settings.default_timeframe,
                limit=settings.default_limit,
                api_key=settings.exchange_api_key,
                secret=settings.exchange_secret,
            ),
            scan=ScanSettings(max_workers=settings.scan_max_workers),
            output=OutputSettings(output_dir=settings.output_dir),
            log_level=settings.log_level,
        )


__all__ = [
    "AppConfig",
    "DataSettings",
    "OutputSettings",
    "ScanSettings",
    "Settings",
    "get_settings",
]

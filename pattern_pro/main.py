"""
Pattern Detection Pro: main entry point
========================================
Usage:
    # With CSV data:
    python -m pattern_pro.main --source csv --file data/RELIANCE_1d.csv

    # With ccxt (live exchange data), one or more symbols:
    python -m pattern_pro.main --source ccxt --exchange binance --symbol BTC/USDT --symbol ETH/USDT

    # Save chart + report:
    python -m pattern_pro.main --source csv --file data.csv --save-chart chart.png --save-report

    # List reports saved earlier for a symbol:
    python -m pattern_pro.main --list-reports --symbol BTC/USDT
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import AppConfig, get_settings
from .domain.entities import PatternReport
from .domain.value_objects import Candle
from .application.use_cases.detect_patterns import DetectPatternsUseCase
from .application.use_cases.scan_symbols import ScanSymbolsUseCase
from .infrastructure.data_providers.ohlcv_provider import CSVProvider, CCXTProvider
from .infrastructure.repositories.report_repository import ReportRepository
from .presentation.console_output import print_full_report, print_scan_table

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> AppConfig:
    """Parse CLI arguments into AppConfig (defaults from the environment)."""
    config = AppConfig.from_settings(get_settings())

    parser = argparse.ArgumentParser(
        description="Pattern Detection Pro: rule-based chart pattern scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Data source
    parser.add_argument("--source", choices=["csv", "ccxt"], default=config.data.source,
                        help="Data source type")
    parser.add_argument("--file", default="", help="CSV file path")
    parser.add_argument("--exchange", default=config.data.exchange, help="ccxt exchange id")
    parser.add_argument("--symbol", action="append", dest="symbols",
                        help="Trading pair symbol (repeat to scan several)")
    parser.add_argument("--timeframe", default=config.data.timeframe, help="Candle timeframe")
    parser.add_argument("--limit", type=int, default=config.data.limit,
                        help="Number of candles to fetch")

    # Scan
    parser.add_argument("--workers", type=int, default=config.scan.max_workers,
                        help="Worker threads for multi-symbol scans")

    # Output
    parser.add_argument("--chart", action="store_true", help="Show matplotlib chart")
    parser.add_argument("--save-chart", default="", help="Save chart to file path")
    parser.add_argument("--save-report", action="store_true", help="Save report(s) to JSON")
    parser.add_argument("--list-reports", action="store_true",
                        help="List saved reports for the symbol(s) and exit")
    parser.add_argument("--output-dir", default=config.output.output_dir, help="Output directory")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")

    args = parser.parse_args(argv)

    config.data.source = args.source
    config.data.file_path = args.file
    config.data.exchange = args.exchange
    if args.symbols:
        config.data.symbols = args.symbols
    config.data.timeframe = args.timeframe
    config.data.limit = args.limit
    config.scan.max_workers = args.workers
    config.output.show_chart = args.chart
    config.output.save_chart = args.save_chart
    config.output.save_report = args.save_report
    config.output.list_reports = args.list_reports
    config.output.output_dir = args.output_dir
    config.log_level = args.log_level

    return config


def load_candles(config: AppConfig) -> Dict[str, List[Candle]]:
    """Load candles per symbol from the configured data source."""
    if config.data.source == "csv":
        if not config.data.file_path:
            print("ERROR: --file is required when --source=csv")
            sys.exit(1)
        provider = CSVProvider(config.data.file_path)
        return {config.data.symbol: provider.fetch(limit=config.data.limit)}
    elif config.data.source == "ccxt":
        provider = CCXTProvider(
            exchange_id=config.data.exchange,
            api_key=config.data.api_key,
            secret=config.data.secret,
        )
        candles_by_symbol: Dict[str, List[Candle]] = {}
        for symbol in config.data.symbols:
            try:
                candles_by_symbol[symbol] = provider.fetch(
                    symbol=symbol,
                    timeframe=config.data.timeframe,
                    limit=config.data.limit,
                )
            except Exception as exc:
                logger.warning("Failed to fetch %s: %s, skipping.", symbol, exc)
        return candles_by_symbol
    else:
        print(f"ERROR: Unknown source '{config.data.source}'")
        sys.exit(1)


def list_saved_reports(config: AppConfig) -> List[Path]:
    """Print the saved JSON reports of the configured symbols, oldest first per symbol."""
    repo = ReportRepository(output_dir=config.output.output_dir)
    paths = [p for symbol in config.data.symbols for p in repo.list_reports(symbol)]
    if not paths:
        print(f"No saved reports in {config.output.output_dir}")
    for path in paths:
        data = ReportRepository.load(path)
        summary = data["summary"]
        print(f"{path.name}  {data['symbol']:<12} {data['timeframe']:<4} "
              f"{summary['strongest'] or '-':<28} {summary['confidence']:>3}")
    return paths


def run(config: AppConfig) -> Dict[str, PatternReport]:
    """Execute the full detection pipeline."""
    # ── Load data ────────────────────────────────────────────────
    candles_by_symbol = {s: c for s, c in load_candles(config).items() if c}
    if not candles_by_symbol:
        print("ERROR: No candles loaded. Check your data source.")
        sys.exit(1)

    for symbol, candles in candles_by_symbol.items():
        logger.info("Loaded %d candles for %s from %s", len(candles), symbol, config.data.source)

    # ── Detect ───────────────────────────────────────────────────
    scanner = ScanSymbolsUseCase(
        detector=DetectPatternsUseCase(),
        max_workers=config.scan.max_workers,
    )
    reports = scanner.execute(candles_by_symbol)

    # ── Console output ───────────────────────────────────────────
    if len(reports) == 1:
        symbol, report = next(iter(reports.items()))
        print_full_report(report, {
            "symbol": symbol,
            "timeframe": config.data.timeframe,
            "candles": str(len(candles_by_symbol[symbol])),
        })
    else:
        print_scan_table(reports, config.data.timeframe)

    # ── Save reports to JSON ─────────────────────────────────────
    if config.output.save_report:
        repo = ReportRepository(output_dir=config.output.output_dir)
        for symbol, report in reports.items():
            filepath = repo.save(report, symbol=symbol, timeframe=config.data.timeframe)
            print(f"Report saved to: {filepath}")

    # ── Chart output (first symbol) ──────────────────────────────
    if (config.output.show_chart or config.output.save_chart) and reports:
        from .presentation.chart_output import plot_chart
        symbol, report = next(iter(reports.items()))
        plot_chart(
            candles_by_symbol[symbol],
            report,
            title=f"Pattern Detection Pro | {symbol} {config.data.timeframe}",
            save_path=config.output.save_chart or None,
            show=config.output.show_chart,
        )

    return reports


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point."""
    config = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if config.output.list_reports:
        list_saved_reports(config)
        return
    run(config)


if __name__ == "__main__":
    main()

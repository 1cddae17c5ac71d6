"""Tests for ScanSymbolsUseCase (multi-symbol scanning)."""

import logging

import pytest

from pattern_pro.application.use_cases.detect_patterns import DetectPatternsUseCase, detect_patterns
from pattern_pro.application.use_cases.scan_symbols import ScanSymbolsUseCase
from pattern_pro.domain.entities import PatternReport
from pattern_pro.domain.enums import PatternName

from conftest import (
    ASCENDING_HIGHS,
    ASCENDING_LOWS,
    HEAD_AND_SHOULDERS_PATH,
    candles_from_bounds,
    candles_from_path,
    random_walk_candles,
)


class _FailingDetector:
    """Raises for one symbol's candles, delegates for the rest."""

    def __init__(self, poisoned):
        self.poisoned = poisoned
        self.inner = DetectPatternsUseCase()

    def execute(self, candles):
        if candles is self.poisoned:
            raise RuntimeError("bad data")
        return self.inner.execute(candles)


@pytest.fixture
def watchlist():
    return {
        "BTC/USDT": candles_from_path(HEAD_AND_SHOULDERS_PATH),
        "ETH/USDT": candles_from_bounds(ASCENDING_HIGHS, ASCENDING_LOWS),
        "SOL/USDT": random_walk_candles(5),
        "XRP/USDT": random_walk_candles(6),
    }


# ╔══════════════════════════════════════════════════════════════╗
# ║  Scan                                                       ║
# ╚══════════════════════════════════════════════════════════════╝

class TestScanSymbols:

    def test_reports_per_symbol(self, watchlist):
        reports = ScanSymbolsUseCase().execute(watchlist)
        assert list(reports) == list(watchlist)
        assert reports["BTC/USDT"].strongest.pattern == PatternName.HEAD_AND_SHOULDERS
        assert reports["ETH/USDT"].strongest.pattern == PatternName.ASCENDING_TRIANGLE

    def test_matches_single_symbol_detection(self, watchlist):
        reports = ScanSymbolsUseCase().execute(watchlist)
        for symbol, candles in watchlist.items():
            assert reports[symbol] == detect_patterns(candles)

    def test_threaded_scan_keeps_input_order(self, watchlist):
        sequential = ScanSymbolsUseCase(max_workers=1).execute(watchlist)
        threaded = ScanSymbolsUseCase(max_workers=4).execute(watchlist)
        assert list(threaded) == list(watchlist)
        assert threaded == sequential

    def test_failed_symbol_is_skipped(self, watchlist, caplog):
        detector = _FailingDetector(poisoned=watchlist["SOL/USDT"])
        with caplog.at_level(logging.WARNING):
            reports = ScanSymbolsUseCase(detector=detector, max_workers=2).execute(watchlist)
        assert "SOL/USDT" not in reports
        assert list(reports) == ["BTC/USDT", "ETH/USDT", "XRP/USDT"]
        assert "SOL/USDT" in caplog.text

    def test_malformed_candles_are_skipped(self):
        reports = ScanSymbolsUseCase().execute({
            "BAD": [None] * 12,
            "BTC/USDT": candles_from_path(HEAD_AND_SHOULDERS_PATH),
        })
        assert list(reports) == ["BTC/USDT"]

    def test_short_history_gives_empty_report(self):
        reports = ScanSymbolsUseCase().execute({"NEW/USDT": random_walk_candles(1, n=5)})
        assert reports == {"NEW/USDT": PatternReport()}

    def test_empty_watchlist(self):
        assert ScanSymbolsUseCase(max_workers=8).execute({}) == {}

    def test_worker_count_floor(self):
        assert ScanSymbolsUseCase(max_workers=0).max_workers == 1

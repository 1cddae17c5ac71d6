"""
Use case: Scan Symbols
Runs pattern detection for many symbols, one independent call per symbol.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Mapping, Optional, Sequence, Tuple

from ...domain.entities import PatternReport
from ...domain.value_objects import Candle
from .detect_patterns import DetectPatternsUseCase

logger = logging.getLogger(__name__)


class ScanSymbolsUseCase:
    """
    Detect patterns across a watchlist.

    A failure on one symbol is logged and that symbol is left out of the
    result; the rest of the scan carries on.
    """

    def __init__(
        self,
        detector: Optional[DetectPatternsUseCase] = None,
        max_workers: int = 1,
    ):
        self.detector = detector or DetectPatternsUseCase()
        self.max_workers = max(1, max_workers)

    def _detect_one(
        self, symbol: str, candles: Sequence[Candle]
    ) -> Tuple[str, Optional[PatternReport]]:
        try:
            return symbol, self.detector.execute(candles)
        except Exception as exc:
            logger.warning("Pattern detection failed for %s: %s, skipping.", symbol, exc)
            return symbol, None

    def execute(
        self, candles_by_symbol: Mapping[str, Sequence[Candle]]
    ) -> Dict[str, PatternReport]:
        """
        Parameters
        ----------
        candles_by_symbol : symbol → candle window (oldest first)

        Returns
        -------
        dict of symbol → PatternReport, in input order, without failed symbols
        """
        items = list(candles_by_symbol.items())

        if self.max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(lambda item: self._detect_one(*item), items))
        else:
            outcomes = [self._detect_one(symbol, candles) for symbol, candles in items]

        reports = {symbol: report for symbol, report in outcomes if report is not None}

        with_patterns = sum(1 for r in reports.values() if r.strongest is not None)
        logger.info(
            "Scan complete: symbols=%d  analysed=%d  with_patterns=%d",
            len(items), len(reports), with_patterns,
        )
        return reports

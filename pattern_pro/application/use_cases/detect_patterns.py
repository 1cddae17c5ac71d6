"""
Use case: Detect Patterns
Runs every detector family over a candle window and aggregates the result.
"""

import logging
from typing import List, Optional, Sequence

from ...domain.entities import DetectedPattern, PatternReport
from ...domain.value_objects import (
    Candle,
    MIN_CANDLES,
    MIN_CONTINUATION_CANDLES,
    MIN_REVERSAL_CANDLES,
    MIN_TRIANGLE_CANDLES,
)
from ..services.aggregator_service import PatternAggregator
from ..services.candlestick_service import CandlestickPatternService
from ..services.continuation_service import ContinuationPatternService
from ..services.reversal_pattern_service import ReversalPatternService
from ..services.triangle_service import TrianglePatternService

logger = logging.getLogger(__name__)


class DetectPatternsUseCase:
    """
    Main use case: analyse a candle window and return a PatternReport.

    Pipeline:
    1. Gate on the minimum window (fewer than 10 candles → empty report)
    2. Candlestick patterns (last 1–3 candles)
    3. Triangle patterns (≥15 candles, trailing 30)
    4. Reversal patterns (≥30 candles, trailing 60)
    5. Continuation patterns (≥20 candles, trailing 30)
    6. Aggregate: rank, confluence, volume confirmation

    The use case keeps only its detector services; nothing is carried
    between calls.
    """

    def __init__(
        self,
        candlestick_service: Optional[CandlestickPatternService] = None,
        triangle_service: Optional[TrianglePatternService] = None,
        reversal_service: Optional[ReversalPatternService] = None,
        continuation_service: Optional[ContinuationPatternService] = None,
        aggregator: Optional[PatternAggregator] = None,
    ):
        self.candlestick_service = candlestick_service or CandlestickPatternService()
        self.triangle_service = triangle_service or TrianglePatternService()
        self.reversal_service = reversal_service or ReversalPatternService()
        self.continuation_service = continuation_service or ContinuationPatternService()
        self.aggregator = aggregator or PatternAggregator()

    def execute(self, candles: Sequence[Candle]) -> PatternReport:
        """
        Parameters
        ----------
        candles : sequence of Candle, oldest first. Longer histories are
                  fine; only trailing windows are examined.

        Returns
        -------
        PatternReport (empty when nothing is detected)
        """
        bars = tuple(candles or ())
        n = len(bars)
        if n < MIN_CANDLES:
            logger.debug("Only %d candles (< %d), skipping detection.", n, MIN_CANDLES)
            return PatternReport()

        patterns: List[DetectedPattern] = []

        # ── Step 1: Candlestick patterns ─────────────────────────────
        patterns.extend(self.candlestick_service.detect(bars))

        # ── Step 2: Triangles ────────────────────────────────────────
        if n >= MIN_TRIANGLE_CANDLES:
            patterns.extend(self.triangle_service.detect(bars))

        # ── Step 3: Reversals ────────────────────────────────────────
        if n >= MIN_REVERSAL_CANDLES:
            patterns.extend(self.reversal_service.detect(bars))

        # ── Step 4: Continuations ────────────────────────────────────
        if n >= MIN_CONTINUATION_CANDLES:
            patterns.extend(self.continuation_service.detect(bars))

        # ── Step 5: Aggregate ────────────────────────────────────────
        report = self.aggregator.aggregate(patterns, bars)

        logger.debug(
            "Patterns: n=%d  found=%d  strongest=%s  confidence=%d",
            n, report.total_patterns,
            report.strongest.name if report.strongest else "none",
            report.confidence,
        )
        return report


_default_use_case = DetectPatternsUseCase()


def detect_patterns(candles: Sequence[Candle]) -> PatternReport:
    """Detect every supported pattern in ``candles`` with default settings."""
    return _default_use_case.execute(candles)

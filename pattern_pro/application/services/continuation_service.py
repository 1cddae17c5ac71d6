"""
Continuation pattern detection service.

Flags and pennants split the trailing window in two: the older half is the
pole, the newer half (last 15 candles) the consolidation. Wedges use the
swing-point regression slopes of the full trailing window.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from ...domain.entities import DetectedPattern, FlagPattern, LevelPattern, PennantPattern
from ...domain.enums import PatternDirection, PatternName, PatternType
from ...domain.value_objects import Candle, CONTINUATION_LOOKBACK, PATTERN_CONFIDENCE
from .geometry_service import GeometryService


class ContinuationPatternService:
    """Detect flags, pennants and wedges."""

    def __init__(
        self,
        lookback: int = CONTINUATION_LOOKBACK,
        flag_pole_min: float = 0.10,
        pennant_pole_min: float = 0.08,
        min_retracement: float = 0.20,
        max_retracement: float = 0.60,
        consolidation_length: int = 15,
        compression_length: int = 5,
        max_compression: float = 0.5,
        min_wedge_candles: int = 20,
    ):
        self.lookback = lookback
        self.flag_pole_min = flag_pole_min
        self.pennant_pole_min = pennant_pole_min
        self.min_retracement = min_retracement
        self.max_retracement = max_retracement
        self.consolidation_length = consolidation_length
        self.compression_length = compression_length
        self.max_compression = max_compression
        self.min_wedge_candles = min_wedge_candles

    def detect(self, candles: Sequence[Candle]) -> List[DetectedPattern]:
        lookback = min(self.lookback, len(candles))
        patterns: List[DetectedPattern] = []

        for direction in (PatternDirection.BULLISH, PatternDirection.BEARISH):
            flag = self._flag(candles, lookback, direction)
            if flag is not None:
                patterns.append(flag)

        for direction in (PatternDirection.BULLISH, PatternDirection.BEARISH):
            pennant = self._pennant(candles, lookback, direction)
            if pennant is not None:
                patterns.append(pennant)

        for rising in (True, False):
            wedge = self._wedge(candles, lookback, rising)
            if wedge is not None:
                patterns.append(wedge)

        return patterns

    # ------------------------------------------------------------------
    # Measurements
    # ------------------------------------------------------------------

    @staticmethod
    def _pole_bounds(n: int, lookback: int):
        return max(0, n - lookback), max(0, n - lookback // 2)

    def detect_flagpole(
        self,
        candles: Sequence[Candle],
        lookback: int,
        direction: PatternDirection,
        min_move: Optional[float] = None,
        inclusive: bool = False,
    ) -> Optional[float]:
        """
        Fractional pole move (always positive) if the older half of the
        window moved more than ``min_move`` in ``direction``, else None.
        With ``inclusive`` a move of exactly ``min_move`` also counts.
        """
        if min_move is None:
            min_move = self.flag_pole_min
        if not candles:
            return None
        start, mid = self._pole_bounds(len(candles), lookback)
        start_price = candles[start].close
        if start_price == 0:
            return None

        change = (candles[mid].close - start_price) / start_price
        move = change if direction == PatternDirection.BULLISH else -change
        if move > min_move or (inclusive and move == min_move):
            return move
        return None

    def consolidation_angle(self, candles: Sequence[Candle]) -> Optional[float]:
        """Angle in degrees of the close regression over the consolidation."""
        closes = [c.close for c in candles[-self.consolidation_length:]]
        if len(closes) < 5 or closes[0] == 0:
            return None
        slope = GeometryService.linear_regression_slope(closes)
        return math.degrees(math.atan(slope / closes[0]))

    def retracement(self, candles: Sequence[Candle], lookback: int) -> float:
        """Flag move divided by pole move; 0 for a flat pole."""
        start, mid = self._pole_bounds(len(candles), lookback)
        pole_range = abs(candles[mid].close - candles[start].close)
        if pole_range == 0:
            return 0.0
        return abs(candles[-1].close - candles[mid].close) / pole_range

    # ------------------------------------------------------------------
    # Patterns
    # ------------------------------------------------------------------

    def _flag(self, candles, lookback, direction) -> Optional[DetectedPattern]:
        pole = self.detect_flagpole(candles, lookback, direction)
        if pole is None:
            return None

        angle = self.consolidation_angle(candles)
        if angle is None:
            return None
        bullish = direction == PatternDirection.BULLISH
        # the flag drifts against the pole
        if (bullish and angle >= 0) or (not bullish and angle <= 0):
            return None

        retracement = self.retracement(candles, lookback)
        if not (self.min_retracement < retracement < self.max_retracement):
            return None

        name = PatternName.BULL_FLAG if bullish else PatternName.BEAR_FLAG
        return FlagPattern(
            pattern=name,
            direction=direction,
            confidence=PATTERN_CONFIDENCE[name],
            type=PatternType.CONTINUATION,
            description="Bullish flag continuation" if bullish else "Bearish flag continuation",
            pole_move=pole,
            retracement=retracement,
        )

    def _pennant(self, candles, lookback, direction) -> Optional[DetectedPattern]:
        pole = self.detect_flagpole(
            candles, lookback, direction, self.pennant_pole_min, inclusive=True
        )
        if pole is None:
            return None

        body = candles[-self.consolidation_length:]
        recent = body[-self.compression_length:]
        full_range = max(c.high for c in body) - min(c.low for c in body)
        if full_range <= 0:
            return None
        recent_range = max(c.high for c in recent) - min(c.low for c in recent)
        if recent_range / full_range >= self.max_compression:
            return None

        bullish = direction == PatternDirection.BULLISH
        name = PatternName.BULL_PENNANT if bullish else PatternName.BEAR_PENNANT
        return PennantPattern(
            pattern=name,
            direction=direction,
            confidence=PATTERN_CONFIDENCE[name],
            type=PatternType.CONTINUATION,
            description="Bullish pennant continuation" if bullish else "Bearish pennant continuation",
            pole_move=pole,
            apex=len(body),
        )

    def _wedge(self, candles, lookback, rising: bool) -> Optional[DetectedPattern]:
        window = candles[-lookback:] if lookback else []
        if len(window) < self.min_wedge_candles:
            return None

        swing_highs = GeometryService.find_peaks(window)
        swing_lows = GeometryService.find_troughs(window)
        if len(swing_highs) < 3 or len(swing_lows) < 3:
            return None

        high_slope = GeometryService.calculate_slope(swing_highs)
        low_slope = GeometryService.calculate_slope(swing_lows)

        if rising and 0 < high_slope < low_slope:
            support = swing_lows[-1].price
            return LevelPattern(
                pattern=PatternName.RISING_WEDGE,
                direction=PatternDirection.BEARISH,
                confidence=PATTERN_CONFIDENCE[PatternName.RISING_WEDGE],
                type=PatternType.CONTINUATION,
                description="Bearish reversal wedge",
                breakout_level=support * 0.995,
                target=support * 0.92,
            )

        if not rising and high_slope < low_slope < 0:
            resistance = swing_highs[-1].price
            return LevelPattern(
                pattern=PatternName.FALLING_WEDGE,
                direction=PatternDirection.BULLISH,
                confidence=PATTERN_CONFIDENCE[PatternName.FALLING_WEDGE],
                type=PatternType.CONTINUATION,
                description="Bullish reversal wedge",
                breakout_level=resistance * 1.005,
                target=resistance * 1.08,
            )

        return None

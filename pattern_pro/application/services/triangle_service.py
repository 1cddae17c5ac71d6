"""Triangle pattern detection (ascending, descending, symmetrical)."""

from typing import List, Sequence

from ...domain.entities import DetectedPattern, LevelPattern
from ...domain.enums import PatternDirection, PatternName, PatternType
from ...domain.value_objects import Candle, PATTERN_CONFIDENCE, TRIANGLE_LOOKBACK
from .geometry_service import GeometryService


class TrianglePatternService:
    """
    Detects triangles from the swing highs and lows of the trailing window.

    A flat side is tested with ``GeometryService.is_level_flat``; a sloping
    side with the regression slope of its last three swing points.
    """

    def __init__(self, lookback: int = TRIANGLE_LOOKBACK, flat_tolerance: float = 0.01):
        self.lookback = lookback
        self.flat_tolerance = flat_tolerance

    def detect(self, candles: Sequence[Candle]) -> List[DetectedPattern]:
        window = candles[-min(self.lookback, len(candles)):]

        swing_highs = GeometryService.find_peaks(window)
        swing_lows = GeometryService.find_troughs(window)
        if len(swing_highs) < 2 or len(swing_lows) < 2:
            return []

        patterns: List[DetectedPattern] = []

        resistance = GeometryService.calculate_resistance_level(swing_highs)
        support = GeometryService.calculate_support_level(swing_lows)
        resistance_slope = GeometryService.calculate_slope(swing_highs)
        support_slope = GeometryService.calculate_slope(swing_lows)

        # ── Ascending: flat resistance, rising support ───────────────
        if (resistance is not None and support_slope > 0
                and GeometryService.is_level_flat(swing_highs, resistance, self.flat_tolerance)):
            patterns.append(LevelPattern(
                pattern=PatternName.ASCENDING_TRIANGLE,
                direction=PatternDirection.BULLISH,
                confidence=PATTERN_CONFIDENCE[PatternName.ASCENDING_TRIANGLE],
                type=PatternType.TRIANGLE,
                description="Bullish continuation triangle",
                breakout_level=resistance * 1.005,
                target=resistance * 1.05,
            ))

        # ── Descending: flat support, falling resistance ─────────────
        if (support is not None and resistance_slope < 0
                and GeometryService.is_level_flat(swing_lows, support, self.flat_tolerance)):
            patterns.append(LevelPattern(
                pattern=PatternName.DESCENDING_TRIANGLE,
                direction=PatternDirection.BEARISH,
                confidence=PATTERN_CONFIDENCE[PatternName.DESCENDING_TRIANGLE],
                type=PatternType.TRIANGLE,
                description="Bearish continuation triangle",
                breakout_level=support * 0.995,
                target=support * 0.95,
            ))

        # ── Symmetrical: converging sides, apex still ahead ──────────
        if resistance_slope < 0 and support_slope > 0:
            bars_to_apex = GeometryService.find_convergence_point(
                swing_highs, swing_lows, resistance_slope, support_slope
            )
            if bars_to_apex is not None and bars_to_apex > len(window):
                bullish = GeometryService.is_in_uptrend(candles, len(candles) - 1)
                last = window[-1]
                midpoint = (last.high + last.low) / 2
                patterns.append(LevelPattern(
                    pattern=PatternName.SYMMETRICAL_TRIANGLE,
                    direction=PatternDirection.BULLISH if bullish else PatternDirection.BEARISH,
                    confidence=PATTERN_CONFIDENCE[PatternName.SYMMETRICAL_TRIANGLE],
                    type=PatternType.TRIANGLE,
                    description="Neutral triangle - follows trend",
                    breakout_level=midpoint * (1.005 if bullish else 0.995),
                    target=midpoint * (1.08 if bullish else 0.92),
                ))

        return patterns

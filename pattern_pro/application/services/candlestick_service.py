"""
Candlestick Pattern Recognition Service.

Detects classic one- and two-candle reversal patterns on the most recent
candles of a window: doji, hammer, shooting star, hanging man, inverted
hammer, engulfing, harami, dark cloud cover and piercing pattern.

Each detector is an independent predicate with a fixed confidence, so
several patterns can fire on the same pair of candles.

References
----------
- TA-Lib candlestick: https://github.com/TA-Lib/ta-lib-python
- candlestick-patterns: https://github.com/SpiralDevelopment/candlestick-patterns
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ...domain.entities import DetectedPattern
from ...domain.enums import PatternDirection, PatternName, PatternType
from ...domain.value_objects import (
    Candle,
    ENGULFING_VOLUME_CONFIDENCE,
    ENGULFING_VOLUME_RATIO,
    PATTERN_CONFIDENCE,
)
from .geometry_service import GeometryService


class CandlestickPatternService:
    """Detect reversal candlestick patterns on the last one to three candles."""

    def __init__(
        self,
        doji_ratio: float = 0.10,
        shadow_multiple: float = 2.0,
        opposite_shadow_ratio: float = 0.2,
        max_body_ratio: float = 0.5,
        harami_prev_body_ratio: float = 0.7,
        harami_curr_body_ratio: float = 0.5,
    ):
        """
        Parameters
        ----------
        doji_ratio : float
            Maximum body/range ratio for a doji.
        shadow_multiple : float
            Minimum dominant-shadow / body ratio for hammer-like candles.
        opposite_shadow_ratio : float
            Maximum opposite-shadow / body ratio for hammer-like candles.
        max_body_ratio : float
            Maximum body/range ratio for hammer-like candles.
        harami_prev_body_ratio : float
            Minimum previous body relative to the current range.
        harami_curr_body_ratio : float
            Maximum current body relative to the previous body.
        """
        self.doji_ratio = doji_ratio
        self.shadow_multiple = shadow_multiple
        self.opposite_shadow_ratio = opposite_shadow_ratio
        self.max_body_ratio = max_body_ratio
        self.harami_prev_body_ratio = harami_prev_body_ratio
        self.harami_curr_body_ratio = harami_curr_body_ratio

    def detect(
        self, candles: Sequence[Candle], index: Optional[int] = None
    ) -> List[DetectedPattern]:
        """
        Return every candlestick pattern completed at ``index``.

        ``index`` defaults to the last candle. When an earlier index is
        given, the following candle serves as confirmation for the
        inverted hammer.
        """
        n = len(candles)
        if index is None:
            index = n - 1
        if n < 2 or index < 1 or index >= n:
            return []

        curr = candles[index]
        prev = candles[index - 1]
        available = index + 1
        patterns: List[DetectedPattern] = []

        # ── Doji ─────────────────────────────────────────────────────
        if curr.range > 0 and curr.body / curr.range < self.doji_ratio:
            patterns.append(self._pattern(
                PatternName.DOJI, PatternDirection.NEUTRAL, "Indecision candle",
            ))

        hammer_shape = self._is_hammer_shape(curr)
        star_shape = self._is_star_shape(curr)
        uptrend = GeometryService.is_in_uptrend(candles, index)

        # ── Hammer (long lower shadow, after a decline) ──────────────
        if hammer_shape and not uptrend:
            patterns.append(self._pattern(
                PatternName.HAMMER, PatternDirection.BULLISH, "Bullish reversal hammer",
            ))

        # ── Shooting star (long upper shadow, after a rally) ─────────
        if star_shape and uptrend:
            patterns.append(self._pattern(
                PatternName.SHOOTING_STAR, PatternDirection.BEARISH,
                "Bearish reversal shooting star",
            ))

        # ── Engulfing ────────────────────────────────────────────────
        volume_confirm = curr.volume > prev.volume * ENGULFING_VOLUME_RATIO
        if (prev.is_bearish and curr.is_bullish
                and curr.close > prev.open and curr.open < prev.close):
            patterns.append(self._pattern(
                PatternName.BULLISH_ENGULFING, PatternDirection.BULLISH,
                "Strong bullish reversal",
                confidence=ENGULFING_VOLUME_CONFIDENCE if volume_confirm else None,
            ))
        if (prev.is_bullish and curr.is_bearish
                and curr.close < prev.open and curr.open > prev.close):
            patterns.append(self._pattern(
                PatternName.BEARISH_ENGULFING, PatternDirection.BEARISH,
                "Strong bearish reversal",
                confidence=ENGULFING_VOLUME_CONFIDENCE if volume_confirm else None,
            ))

        # ── Hanging man (hammer shape, after a rally) ────────────────
        if hammer_shape and uptrend:
            patterns.append(self._pattern(
                PatternName.HANGING_MAN, PatternDirection.BEARISH,
                "Bearish reversal hanging man",
            ))

        # ── Inverted hammer (star shape, after a decline) ────────────
        if star_shape and not uptrend and available >= 3:
            confirmation = candles[index + 1] if index + 1 < n else None
            if confirmation is None or confirmation.close > curr.close:
                patterns.append(self._pattern(
                    PatternName.INVERTED_HAMMER, PatternDirection.BULLISH,
                    "Bullish reversal (needs confirmation)",
                ))

        if available < 3:
            return patterns

        # ── Harami ───────────────────────────────────────────────────
        prev_large = prev.body > curr.range * self.harami_prev_body_ratio
        curr_small = curr.body < prev.body * self.harami_curr_body_ratio
        if (prev.is_bearish and curr.is_bullish and prev_large and curr_small
                and curr.open >= prev.close and curr.close <= prev.open):
            patterns.append(self._pattern(
                PatternName.BULLISH_HARAMI, PatternDirection.BULLISH,
                "Bullish reversal harami",
            ))
        if (prev.is_bullish and curr.is_bearish and prev_large and curr_small
                and curr.open <= prev.close and curr.close >= prev.open):
            patterns.append(self._pattern(
                PatternName.BEARISH_HARAMI, PatternDirection.BEARISH,
                "Bearish reversal harami",
            ))

        # ── Dark cloud cover / Piercing (trend measured at prev) ─────
        if (prev.is_bullish and curr.is_bearish
                and curr.open > prev.high and curr.close < prev.midpoint
                and GeometryService.is_in_uptrend(candles, index - 1)):
            patterns.append(self._pattern(
                PatternName.DARK_CLOUD_COVER, PatternDirection.BEARISH,
                "Bearish reversal dark cloud",
            ))
        if (prev.is_bearish and curr.is_bullish
                and curr.open < prev.low and curr.close > prev.midpoint
                and GeometryService.is_in_downtrend(candles, index - 1)):
            patterns.append(self._pattern(
                PatternName.PIERCING_PATTERN, PatternDirection.BULLISH,
                "Bullish reversal piercing pattern",
            ))

        return patterns

    # ------------------------------------------------------------------
    # Shape tests
    # ------------------------------------------------------------------

    def _is_hammer_shape(self, c: Candle) -> bool:
        """Long lower shadow, negligible upper shadow, small body."""
        return (c.lower_shadow >= self.shadow_multiple * c.body
                and c.upper_shadow <= self.opposite_shadow_ratio * c.body
                and c.body < self.max_body_ratio * c.range)

    def _is_star_shape(self, c: Candle) -> bool:
        """Long upper shadow, negligible lower shadow, small body."""
        return (c.upper_shadow >= self.shadow_multiple * c.body
                and c.lower_shadow <= self.opposite_shadow_ratio * c.body
                and c.body < self.max_body_ratio * c.range)

    @staticmethod
    def _pattern(
        name: PatternName,
        direction: PatternDirection,
        description: str,
        confidence: Optional[int] = None,
    ) -> DetectedPattern:
        return DetectedPattern(
            pattern=name,
            direction=direction,
            confidence=confidence if confidence is not None else PATTERN_CONFIDENCE[name],
            type=PatternType.CANDLESTICK,
            description=description,
        )

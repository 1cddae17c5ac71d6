"""
Reversal pattern detection service.

Recognises double tops/bottoms, head-and-shoulders (regular and inverse)
and cup-and-handle over the trailing window (up to 60 candles). Peaks and
troughs are the strict swing points of ``GeometryService``; neckline and
intervening extremes are found by inclusive linear scans.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ...domain.entities import DetectedPattern, LevelPattern, NecklinePattern
from ...domain.enums import PatternDirection, PatternName, PatternType
from ...domain.value_objects import Candle, PATTERN_CONFIDENCE, REVERSAL_LOOKBACK
from .geometry_service import GeometryService


def _relative_diff(a: float, b: float) -> Optional[float]:
    """|a - b| / |b|, or None when the reference price is zero."""
    if b == 0:
        return None
    return abs(a - b) / abs(b)


class ReversalPatternService:
    """Detect multi-swing reversal structures."""

    def __init__(
        self,
        lookback: int = REVERSAL_LOOKBACK,
        peak_tolerance: float = 0.02,
        min_retrace: float = 0.05,
        shoulder_tolerance: float = 0.03,
        handle_length: int = 10,
        min_cup_candles: int = 40,
    ):
        """
        Parameters
        ----------
        lookback : int
            Trailing window length.
        peak_tolerance : float
            Maximum relative gap between the two tops/bottoms of a double.
        min_retrace : float
            Minimum depth of the intervening trough/peak of a double.
        shoulder_tolerance : float
            Maximum relative gap between the two shoulders.
        handle_length : int
            Number of trailing candles treated as the handle.
        min_cup_candles : int
            Minimum window length for a cup-and-handle.
        """
        self.lookback = lookback
        self.peak_tolerance = peak_tolerance
        self.min_retrace = min_retrace
        self.shoulder_tolerance = shoulder_tolerance
        self.handle_length = handle_length
        self.min_cup_candles = min_cup_candles

    def detect(self, candles: Sequence[Candle]) -> List[DetectedPattern]:
        window = candles[-min(self.lookback, len(candles)):]
        peaks = GeometryService.find_peaks(window)
        troughs = GeometryService.find_troughs(window)

        patterns: List[DetectedPattern] = []
        for found in (
            self._double_top(window, peaks),
            self._double_bottom(window, troughs),
            self._head_and_shoulders(window, peaks),
            self._inverse_head_and_shoulders(window, troughs),
            self._cup_and_handle(window),
        ):
            if found is not None:
                patterns.append(found)
        return patterns

    # ------------------------------------------------------------------
    # Doubles
    # ------------------------------------------------------------------

    def _double_top(self, window, peaks) -> Optional[DetectedPattern]:
        if len(peaks) < 2:
            return None
        first, second = peaks[-2], peaks[-1]
        gap = _relative_diff(second.price, first.price)
        if gap is None or gap >= self.peak_tolerance:
            return None

        trough = GeometryService.find_trough_between(window, first.index, second.index)
        if trough is None or (first.price - trough.price) / first.price <= self.min_retrace:
            return None

        return LevelPattern(
            pattern=PatternName.DOUBLE_TOP,
            direction=PatternDirection.BEARISH,
            confidence=PATTERN_CONFIDENCE[PatternName.DOUBLE_TOP],
            type=PatternType.REVERSAL,
            description="Bearish double top reversal",
            breakout_level=trough.price * 0.995,
            target=trough.price * 0.90,
        )

    def _double_bottom(self, window, troughs) -> Optional[DetectedPattern]:
        if len(troughs) < 2:
            return None
        first, second = troughs[-2], troughs[-1]
        gap = _relative_diff(second.price, first.price)
        if gap is None or gap >= self.peak_tolerance:
            return None

        peak = GeometryService.find_peak_between(window, first.index, second.index)
        if peak is None or (peak.price - first.price) / first.price <= self.min_retrace:
            return None

        return LevelPattern(
            pattern=PatternName.DOUBLE_BOTTOM,
            direction=PatternDirection.BULLISH,
            confidence=PATTERN_CONFIDENCE[PatternName.DOUBLE_BOTTOM],
            type=PatternType.REVERSAL,
            description="Bullish double bottom reversal",
            breakout_level=peak.price * 1.005,
            target=peak.price * 1.10,
        )

    # ------------------------------------------------------------------
    # Head and shoulders
    # ------------------------------------------------------------------

    def _head_and_shoulders(self, window, peaks) -> Optional[DetectedPattern]:
        if len(peaks) < 3:
            return None
        left, head, right = peaks[-3:]
        shoulders_gap = _relative_diff(right.price, left.price)
        if (shoulders_gap is None or shoulders_gap >= self.shoulder_tolerance
                or head.price <= left.price or head.price <= right.price):
            return None

        left_trough = GeometryService.find_trough_between(window, left.index, head.index)
        right_trough = GeometryService.find_trough_between(window, head.index, right.index)
        lows = [t.price for t in (left_trough, right_trough) if t is not None]
        if not lows:
            return None
        neckline = min(lows)

        return NecklinePattern(
            pattern=PatternName.HEAD_AND_SHOULDERS,
            direction=PatternDirection.BEARISH,
            confidence=PATTERN_CONFIDENCE[PatternName.HEAD_AND_SHOULDERS],
            type=PatternType.REVERSAL,
            description="Bearish head and shoulders reversal",
            breakout_level=neckline * 0.995,
            target=neckline - (head.price - neckline),
            neckline=neckline,
        )

    def _inverse_head_and_shoulders(self, window, troughs) -> Optional[DetectedPattern]:
        if len(troughs) < 3:
            return None
        left, head, right = troughs[-3:]
        shoulders_gap = _relative_diff(right.price, left.price)
        if (shoulders_gap is None or shoulders_gap >= self.shoulder_tolerance
                or head.price >= left.price or head.price >= right.price):
            return None

        left_peak = GeometryService.find_peak_between(window, left.index, head.index)
        right_peak = GeometryService.find_peak_between(window, head.index, right.index)
        highs = [p.price for p in (left_peak, right_peak) if p is not None]
        if not highs:
            return None
        neckline = max(highs)

        return NecklinePattern(
            pattern=PatternName.INVERSE_HEAD_AND_SHOULDERS,
            direction=PatternDirection.BULLISH,
            confidence=PATTERN_CONFIDENCE[PatternName.INVERSE_HEAD_AND_SHOULDERS],
            type=PatternType.REVERSAL,
            description="Bullish inverse head and shoulders",
            breakout_level=neckline * 1.005,
            target=neckline + (neckline - head.price),
            neckline=neckline,
        )

    # ------------------------------------------------------------------
    # Cup and handle
    # ------------------------------------------------------------------

    def _cup_and_handle(self, window) -> Optional[DetectedPattern]:
        if len(window) < self.min_cup_candles:
            return None

        cup = window[:-self.handle_length]
        handle = window[-self.handle_length:]

        cup_start = cup[0].close
        if cup_start == 0:
            return None
        cup_bottom = min(c.low for c in cup)
        cup_depth = (cup_start - cup_bottom) / cup_start
        cup_recovery = abs(cup[-1].close - cup_start) / cup_start
        if not (0.12 < cup_depth < 0.50 and cup_recovery < 0.05):
            return None

        handle_high = max(c.high for c in handle)
        handle_low = min(c.low for c in handle)
        if handle_high == 0:
            return None
        handle_depth = (handle_high - handle_low) / handle_high
        if not (0.05 < handle_depth < cup_depth * 0.5):
            return None

        return LevelPattern(
            pattern=PatternName.CUP_AND_HANDLE,
            direction=PatternDirection.BULLISH,
            confidence=PATTERN_CONFIDENCE[PatternName.CUP_AND_HANDLE],
            type=PatternType.REVERSAL,
            description="Bullish cup and handle continuation",
            breakout_level=handle_high * 1.005,
            target=handle_high * (1 + cup_depth),
        )

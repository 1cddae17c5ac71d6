"""Swing points, levels, slopes and trend tests shared by every detector."""

from typing import List, Optional, Sequence

import numpy as np

from ...domain.enums import SwingField
from ...domain.value_objects import Candle, SwingPoint, TREND_LOOKBACK


class GeometryService:
    """Stateless geometric helpers over a candle window."""

    # ------------------------------------------------------------------
    # Trend
    # ------------------------------------------------------------------

    @staticmethod
    def is_in_uptrend(
        candles: Sequence[Candle], end_index: int, lookback: int = TREND_LOOKBACK
    ) -> bool:
        """
        True iff the close at ``end_index`` is above the mean close of
        ``[end_index - lookback, end_index]`` (clamped to the window start).
        """
        start = max(0, end_index - lookback)
        closes = np.array([c.close for c in candles[start:end_index + 1]], dtype=float)
        if closes.size == 0:
            return False
        return bool(candles[end_index].close > closes.mean())

    @staticmethod
    def is_in_downtrend(
        candles: Sequence[Candle], end_index: int, lookback: int = TREND_LOOKBACK
    ) -> bool:
        return not GeometryService.is_in_uptrend(candles, end_index, lookback)

    # ------------------------------------------------------------------
    # Swing points
    # ------------------------------------------------------------------

    @staticmethod
    def find_swing_points(
        candles: Sequence[Candle], swing_field: SwingField = SwingField.HIGH
    ) -> List[SwingPoint]:
        """
        Interior local extrema, strict on both sides.

        The first and last candle are never reported: they lack a neighbour.
        """
        key = swing_field.value
        prices = [getattr(c, key) for c in candles]
        points: List[SwingPoint] = []

        for i in range(1, len(prices) - 1):
            if swing_field == SwingField.HIGH:
                is_swing = prices[i] > prices[i - 1] and prices[i] > prices[i + 1]
            else:
                is_swing = prices[i] < prices[i - 1] and prices[i] < prices[i + 1]
            if is_swing:
                points.append(SwingPoint(index=i, price=prices[i]))

        return points

    @staticmethod
    def find_peaks(candles: Sequence[Candle]) -> List[SwingPoint]:
        return GeometryService.find_swing_points(candles, SwingField.HIGH)

    @staticmethod
    def find_troughs(candles: Sequence[Candle]) -> List[SwingPoint]:
        return GeometryService.find_swing_points(candles, SwingField.LOW)

    @staticmethod
    def find_peak_between(
        candles: Sequence[Candle], start_idx: int, end_idx: int
    ) -> Optional[SwingPoint]:
        """Highest high in the inclusive range, or None if the range is empty."""
        if start_idx < 0:
            return None
        best: Optional[SwingPoint] = None
        for i in range(start_idx, min(end_idx, len(candles) - 1) + 1):
            if best is None or candles[i].high > best.price:
                best = SwingPoint(index=i, price=candles[i].high)
        return best

    @staticmethod
    def find_trough_between(
        candles: Sequence[Candle], start_idx: int, end_idx: int
    ) -> Optional[SwingPoint]:
        """Lowest low in the inclusive range, or None if the range is empty."""
        if start_idx < 0:
            return None
        best: Optional[SwingPoint] = None
        for i in range(start_idx, min(end_idx, len(candles) - 1) + 1):
            if best is None or candles[i].low < best.price:
                best = SwingPoint(index=i, price=candles[i].low)
        return best

    # ------------------------------------------------------------------
    # Levels and slopes
    # ------------------------------------------------------------------

    @staticmethod
    def _recent_mean(points: Sequence[SwingPoint]) -> Optional[float]:
        if len(points) < 2:
            return None
        recent = points[-3:]
        return sum(p.price for p in recent) / len(recent)

    @staticmethod
    def calculate_resistance_level(swing_highs: Sequence[SwingPoint]) -> Optional[float]:
        """Mean of the last three swing highs (needs at least two)."""
        return GeometryService._recent_mean(swing_highs)

    @staticmethod
    def calculate_support_level(swing_lows: Sequence[SwingPoint]) -> Optional[float]:
        """Mean of the last three swing lows (needs at least two)."""
        return GeometryService._recent_mean(swing_lows)

    @staticmethod
    def linear_regression_slope(values: Sequence[float]) -> float:
        """
        OLS slope of ``values`` against positions ``0..n-1``.

        slope = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)

        Returns 0.0 when fewer than two values are given (zero denominator).
        """
        n = len(values)
        if n < 2:
            return 0.0
        y = np.asarray(values, dtype=float)
        x = np.arange(n, dtype=float)
        denominator = n * np.sum(x * x) - np.sum(x) ** 2
        if denominator == 0:
            return 0.0
        return float((n * np.sum(x * y) - np.sum(x) * np.sum(y)) / denominator)

    @staticmethod
    def calculate_slope(points: Sequence[SwingPoint]) -> float:
        """Regression slope over the most recent three swing points."""
        if len(points) < 2:
            return 0.0
        return GeometryService.linear_regression_slope([p.price for p in points[-3:]])

    @staticmethod
    def is_level_flat(
        points: Sequence[SwingPoint], level: float, tolerance: float = 0.01
    ) -> bool:
        """Every one of the last three points lies within ``tolerance`` of ``level``."""
        if level == 0:
            return False
        return all(abs(p.price - level) / abs(level) < tolerance for p in points[-3:])

    @staticmethod
    def find_convergence_point(
        swing_highs: Sequence[SwingPoint],
        swing_lows: Sequence[SwingPoint],
        resistance_slope: float,
        support_slope: float,
    ) -> Optional[float]:
        """Estimated bars until the two trendlines meet."""
        slope_diff = support_slope - resistance_slope
        if abs(slope_diff) < 0.001 or not swing_highs or not swing_lows:
            return None
        price_gap = swing_highs[-1].price - swing_lows[-1].price
        return price_gap / abs(slope_diff)

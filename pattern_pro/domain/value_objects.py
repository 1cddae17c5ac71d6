"""Value objects and detection constants for the Pattern Detection Pro system."""

from dataclasses import dataclass

from .enums import PatternName


# ============================================================================
# Window gates
# ============================================================================

MIN_CANDLES = 10               # below this the engine reports nothing
MIN_TRIANGLE_CANDLES = 15
MIN_CONTINUATION_CANDLES = 20
MIN_REVERSAL_CANDLES = 30

TRIANGLE_LOOKBACK = 30
REVERSAL_LOOKBACK = 60
CONTINUATION_LOOKBACK = 30
TREND_LOOKBACK = 20
VOLUME_LOOKBACK = 20


# ============================================================================
# Base confidence per pattern (heuristic, not learned)
# ============================================================================

PATTERN_CONFIDENCE = {
    PatternName.DOJI: 60,
    PatternName.HAMMER: 75,
    PatternName.SHOOTING_STAR: 75,
    PatternName.HANGING_MAN: 70,
    PatternName.INVERTED_HAMMER: 65,
    PatternName.BULLISH_ENGULFING: 70,
    PatternName.BEARISH_ENGULFING: 70,
    PatternName.BULLISH_HARAMI: 70,
    PatternName.BEARISH_HARAMI: 70,
    PatternName.DARK_CLOUD_COVER: 75,
    PatternName.PIERCING_PATTERN: 75,
    PatternName.ASCENDING_TRIANGLE: 75,
    PatternName.DESCENDING_TRIANGLE: 75,
    PatternName.SYMMETRICAL_TRIANGLE: 70,
    PatternName.DOUBLE_TOP: 80,
    PatternName.DOUBLE_BOTTOM: 80,
    PatternName.HEAD_AND_SHOULDERS: 85,
    PatternName.INVERSE_HEAD_AND_SHOULDERS: 85,
    PatternName.CUP_AND_HANDLE: 80,
    PatternName.BULL_FLAG: 85,
    PatternName.BEAR_FLAG: 85,
    PatternName.BULL_PENNANT: 80,
    PatternName.BEAR_PENNANT: 80,
    PatternName.RISING_WEDGE: 75,
    PatternName.FALLING_WEDGE: 75,
}

# Engulfing with a volume surge on the engulfing candle
ENGULFING_VOLUME_CONFIDENCE = 85
ENGULFING_VOLUME_RATIO = 1.2


# ============================================================================
# Aggregation boosts
# ============================================================================

CONFLUENCE_BOOST = 1.10
VOLUME_SURGE_RATIO = 1.5
VOLUME_SURGE_BOOST = 1.05
MAX_CONFIDENCE = 100


@dataclass(frozen=True)
class Candle:
    """Single OHLCV candle, oldest-first in any sequence."""
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    timestamp: object = None  # datetime, str, or numeric timestamp

    @property
    def body(self) -> float:
        return abs(self.close - self.open)

    @property
    def range(self) -> float:
        return self.high - self.low

    @property
    def upper_shadow(self) -> float:
        return self.high - max(self.open, self.close)

    @property
    def lower_shadow(self) -> float:
        return min(self.open, self.close) - self.low

    @property
    def midpoint(self) -> float:
        """Midpoint of the body."""
        return (self.open + self.close) / 2

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open


@dataclass(frozen=True)
class SwingPoint:
    """Local extremum inside a candle window."""
    index: int   # position in the supplied slice
    price: float

"""Domain enums for the Pattern Detection Pro system."""

from enum import Enum


class PatternDirection(Enum):
    """Directional bias implied by a pattern."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class PatternType(Enum):
    """Detector family that produced a pattern."""
    CANDLESTICK = "candlestick"
    TRIANGLE = "triangle"
    REVERSAL = "reversal"
    CONTINUATION = "continuation"


class PatternName(Enum):
    """Every pattern the engine can report."""
    # Candlestick
    DOJI = "DOJI"
    HAMMER = "HAMMER"
    SHOOTING_STAR = "SHOOTING_STAR"
    HANGING_MAN = "HANGING_MAN"
    INVERTED_HAMMER = "INVERTED_HAMMER"
    BULLISH_ENGULFING = "BULLISH_ENGULFING"
    BEARISH_ENGULFING = "BEARISH_ENGULFING"
    BULLISH_HARAMI = "BULLISH_HARAMI"
    BEARISH_HARAMI = "BEARISH_HARAMI"
    DARK_CLOUD_COVER = "DARK_CLOUD_COVER"
    PIERCING_PATTERN = "PIERCING_PATTERN"
    # Triangle
    ASCENDING_TRIANGLE = "ASCENDING_TRIANGLE"
    DESCENDING_TRIANGLE = "DESCENDING_TRIANGLE"
    SYMMETRICAL_TRIANGLE = "SYMMETRICAL_TRIANGLE"
    # Reversal
    DOUBLE_TOP = "DOUBLE_TOP"
    DOUBLE_BOTTOM = "DOUBLE_BOTTOM"
    HEAD_AND_SHOULDERS = "HEAD_AND_SHOULDERS"
    INVERSE_HEAD_AND_SHOULDERS = "INVERSE_HEAD_AND_SHOULDERS"
    CUP_AND_HANDLE = "CUP_AND_HANDLE"
    # Continuation
    BULL_FLAG = "BULL_FLAG"
    BEAR_FLAG = "BEAR_FLAG"
    BULL_PENNANT = "BULL_PENNANT"
    BEAR_PENNANT = "BEAR_PENNANT"
    RISING_WEDGE = "RISING_WEDGE"
    FALLING_WEDGE = "FALLING_WEDGE"


class SwingField(Enum):
    """Candle price used for swing-point extraction."""
    HIGH = "high"
    LOW = "low"

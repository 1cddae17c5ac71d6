"""Domain entities for the Pattern Detection Pro system."""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List, Optional

from .enums import PatternDirection, PatternName, PatternType


@dataclass(frozen=True)
class DetectedPattern:
    """A pattern recognised in a candle window.

    Candlestick patterns use this variant as-is; chart patterns use one of
    the subclasses below, which add their price levels.
    """
    pattern: PatternName
    direction: PatternDirection
    confidence: int
    type: PatternType
    description: str

    @property
    def name(self) -> str:
        return self.pattern.value

    @property
    def is_bullish(self) -> bool:
        return self.direction == PatternDirection.BULLISH

    @property
    def is_bearish(self) -> bool:
        return self.direction == PatternDirection.BEARISH

    def to_dict(self) -> dict:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data


@dataclass(frozen=True)
class LevelPattern(DetectedPattern):
    """Chart pattern with a breakout trigger and a price target."""
    breakout_level: float
    target: float


@dataclass(frozen=True)
class NecklinePattern(LevelPattern):
    """Head-and-shoulders variant; breakout is measured from the neckline."""
    neckline: float


@dataclass(frozen=True)
class FlagPattern(DetectedPattern):
    """Flag: a sharp pole followed by a counter-trend drift."""
    pole_move: float     # fractional gain/drop of the pole, always positive
    retracement: float   # flag move / pole move


@dataclass(frozen=True)
class PennantPattern(DetectedPattern):
    """Pennant: a sharp pole followed by a compressing consolidation."""
    pole_move: float
    apex: int            # consolidation length in candles


@dataclass
class PatternReport:
    """Aggregated result of one detection call."""
    patterns: List[DetectedPattern] = field(default_factory=list)
    strongest: Optional[DetectedPattern] = None
    confidence: int = 0
    confluence: bool = False

    @property
    def total_patterns(self) -> int:
        return len(self.patterns)

    @property
    def bullish_count(self) -> int:
        return sum(1 for p in self.patterns if p.is_bullish)

    @property
    def bearish_count(self) -> int:
        return sum(1 for p in self.patterns if p.is_bearish)

    @property
    def bias(self) -> PatternDirection:
        if self.strongest is None:
            return PatternDirection.NEUTRAL
        return self.strongest.direction

    def to_dict(self) -> dict:
        return {
            "patterns": [p.to_dict() for p in self.patterns],
            "strongest": self.strongest.to_dict() if self.strongest else None,
            "confidence": self.confidence,
            "confluence": self.confluence,
            "total_patterns": self.total_patterns,
            "bullish_count": self.bullish_count,
            "bearish_count": self.bearish_count,
            "bias": self.bias.value,
        }

"""Merges detector outputs into one confidence-scored PatternReport."""

import math
from typing import List, Sequence

import numpy as np

from ...domain.entities import DetectedPattern, PatternReport
from ...domain.value_objects import (
    Candle,
    CONFLUENCE_BOOST,
    MAX_CONFIDENCE,
    VOLUME_LOOKBACK,
    VOLUME_SURGE_BOOST,
    VOLUME_SURGE_RATIO,
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class PatternAggregator:
    """Rank patterns, detect confluence and apply the confidence boosts."""

    @staticmethod
    def volume_ratio(candles: Sequence[Candle], lookback: int = VOLUME_LOOKBACK) -> float:
        """
        Current volume over the summed volume of the last ``lookback`` candles
        divided by ``lookback``. Shorter inputs are not re-normalised, so a
        short window reads as a higher ratio.
        """
        if not candles:
            return 0.0
        volumes = np.array([c.volume for c in candles[-lookback:]], dtype=float)
        mean_volume = volumes.sum() / lookback
        if mean_volume <= 0:
            return 0.0
        return float(candles[-1].volume / mean_volume)

    def aggregate(
        self, patterns: List[DetectedPattern], candles: Sequence[Candle]
    ) -> PatternReport:
        if not patterns:
            return PatternReport()

        # sorted() is stable: ties keep detector order
        ranked = sorted(patterns, key=lambda p: p.confidence, reverse=True)
        strongest = ranked[0]

        same_direction = sum(1 for p in ranked if p.direction == strongest.direction)
        confluence = same_direction >= 2

        confidence = float(strongest.confidence)
        if confluence:
            confidence = min(MAX_CONFIDENCE, confidence * CONFLUENCE_BOOST)

        if self.volume_ratio(candles) > VOLUME_SURGE_RATIO:
            confidence = min(MAX_CONFIDENCE, confidence * VOLUME_SURGE_BOOST)

        return PatternReport(
            patterns=ranked,
            strongest=strongest,
            confidence=_round_half_up(confidence),
            confluence=confluence,
        )

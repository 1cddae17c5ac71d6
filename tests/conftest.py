"""Shared candle builders for the pattern engine tests.

Every dataset is built from explicit price lists so the swing points,
slopes and thresholds of each scenario can be checked by hand.
"""

from typing import List, Sequence

import numpy as np
import pytest

from pattern_pro.domain.value_objects import Candle


def candles_from_path(path: Sequence[float], volume: float = 1000.0) -> List[Candle]:
    """Bullish candles of fixed shape centred on each path price.

    high = p + 1, low = p - 1, so swing points coincide with the path's
    strict local extrema.
    """
    return [
        Candle(open=p - 0.5, high=p + 1, low=p - 1, close=p + 0.5, volume=volume)
        for p in path
    ]


def candles_from_bounds(
    highs: Sequence[float], lows: Sequence[float], volume: float = 1000.0
) -> List[Candle]:
    """Candles with explicit highs and lows; bodies sit just inside the range."""
    return [
        Candle(open=lo + 0.5, high=hi, low=lo, close=hi - 0.5, volume=volume)
        for hi, lo in zip(highs, lows)
    ]


def random_walk_candles(seed: int, n: int = 80) -> List[Candle]:
    """Noisy but valid OHLCV candles (positive prices, consistent wicks)."""
    rng = np.random.RandomState(seed)
    closes = 100.0 + np.cumsum(rng.randn(n) * 1.5)
    closes = np.maximum(closes, 5.0)
    candles = []
    prev_close = closes[0]
    for i in range(n):
        open_ = prev_close
        close = closes[i]
        high = max(open_, close) + abs(rng.randn()) * 0.8
        low = max(0.5, min(open_, close) - abs(rng.randn()) * 0.8)
        candles.append(Candle(
            open=float(open_), high=float(high), low=float(low), close=float(close),
            volume=float(rng.uniform(500, 5000)),
        ))
        prev_close = close
    return candles


# Swing highs of 500 at 3, 9, 15; swing lows 478, 479, 482 at 6, 12, 18
ASCENDING_HIGHS = [494, 496, 498, 500, 496, 492, 488, 492, 496, 500,
                   496, 492, 489, 492, 496, 500, 497, 494, 492, 495]
ASCENDING_LOWS = [h - 10 for h in ASCENDING_HIGHS]

# Falling swing highs 1030, 1015, 1000; rising swing lows 300, 304, 308
SYMMETRICAL_HIGHS = [1000, 1010, 1020, 1030, 1020, 1010, 990, 1000, 1008, 1015,
                     1005, 995, 985, 990, 995, 1000, 995, 990, 985, 990]
SYMMETRICAL_LOWS = [320, 330, 340, 350, 330, 310, 300, 320, 335, 345,
                    330, 315, 304, 315, 325, 335, 325, 315, 308, 318]

# Peaks 110 (i=10) and 109.5 (i=20) around a trough of 100 (i=15)
DOUBLE_TOP_PATH = (
    list(range(100, 111))
    + [108, 106, 104, 102, 100]
    + [102, 104, 106, 108, 109.5]
    + [108, 106, 104, 102, 100, 99, 98, 97, 96]
)

# Shoulders 110 / 110.5, head 120, troughs 100 and 103
HEAD_AND_SHOULDERS_PATH = (
    [100, 102, 104, 106, 108, 110]
    + [108, 106, 104, 102, 100]
    + [104, 108, 112, 116, 120]
    + [117, 114, 111, 108, 103]
    + [105, 106.5, 108, 109.5, 110.5]
    + [108, 105, 102, 99]
)

# 40-candle cup from 100 down to 80 and back to 99, then a 10-candle handle
CUP_AND_HANDLE_PATH = (
    [100 - i for i in range(21)]
    + list(range(81, 100))
    + [99, 98, 97, 96, 95.5, 96, 96.5, 97, 97.5, 98]
)

# Rising wedge: swing highs 110, 112, 114; swing lows 100, 104, 108
WEDGE_HIGHS = [104, 106, 108, 110, 109, 108, 107, 109, 111, 112,
               111, 110, 109, 111, 113, 114, 113, 112, 111, 112]
WEDGE_LOWS = [101, 102, 103, 104, 103, 102, 100, 102, 104, 106,
              105, 104.5, 104, 106, 108, 109, 108.8, 108.5, 108, 109]


# Falling closes 120 → 102, bearish candles
DOWNTREND_PREFIX = [
    Candle(open=c + 1, high=c + 1.5, low=c - 0.5, close=c, volume=1000.0)
    for c in range(120, 100, -2)
]

# Rising closes 100 → 118, bullish candles
UPTREND_PREFIX = [
    Candle(open=c - 1, high=c + 0.5, low=c - 1.5, close=c, volume=1000.0)
    for c in range(100, 120, 2)
]


@pytest.fixture
def downtrend_prefix() -> List[Candle]:
    return list(DOWNTREND_PREFIX)


@pytest.fixture
def uptrend_prefix() -> List[Candle]:
    return list(UPTREND_PREFIX)


@pytest.fixture
def flat_prefix() -> List[Candle]:
    """Nine small bullish candles around 100."""
    return [Candle(open=99.8, high=100.5, low=99.5, close=100.2, volume=1000.0)] * 9

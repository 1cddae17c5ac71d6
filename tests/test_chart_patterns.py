"""Tests for the triangle, reversal and continuation detectors."""

import pytest

from pattern_pro.application.services.continuation_service import ContinuationPatternService
from pattern_pro.application.services.reversal_pattern_service import ReversalPatternService
from pattern_pro.application.services.triangle_service import TrianglePatternService
from pattern_pro.domain.entities import FlagPattern, LevelPattern, NecklinePattern, PennantPattern
from pattern_pro.domain.enums import PatternDirection, PatternName, PatternType
from pattern_pro.domain.value_objects import Candle

from conftest import (
    ASCENDING_HIGHS,
    ASCENDING_LOWS,
    CUP_AND_HANDLE_PATH,
    DOUBLE_TOP_PATH,
    HEAD_AND_SHOULDERS_PATH,
    SYMMETRICAL_HIGHS,
    SYMMETRICAL_LOWS,
    WEDGE_HIGHS,
    WEDGE_LOWS,
    candles_from_bounds,
    candles_from_path,
)


def _names(patterns):
    return [p.pattern for p in patterns]


def _candles_from_closes(closes):
    return [Candle(open=c, high=c + 0.5, low=c - 0.5, close=c) for c in closes]


# ╔══════════════════════════════════════════════════════════════╗
# ║  Triangles                                                  ║
# ╚══════════════════════════════════════════════════════════════╝

class TestTriangles:

    def test_ascending_triangle(self):
        candles = candles_from_bounds(ASCENDING_HIGHS, ASCENDING_LOWS)
        patterns = TrianglePatternService().detect(candles)
        assert _names(patterns) == [PatternName.ASCENDING_TRIANGLE]
        triangle = patterns[0]
        assert isinstance(triangle, LevelPattern)
        assert triangle.direction == PatternDirection.BULLISH
        assert triangle.confidence == 75
        assert triangle.type == PatternType.TRIANGLE
        assert triangle.breakout_level == pytest.approx(502.5)
        assert triangle.target == pytest.approx(525.0)

    def test_descending_triangle(self):
        highs = [910 - h for h in ASCENDING_HIGHS]
        lows = [900 - h for h in ASCENDING_HIGHS]
        patterns = TrianglePatternService().detect(candles_from_bounds(highs, lows))
        assert _names(patterns) == [PatternName.DESCENDING_TRIANGLE]
        triangle = patterns[0]
        assert triangle.direction == PatternDirection.BEARISH
        assert triangle.breakout_level == pytest.approx(398.0)
        assert triangle.target == pytest.approx(380.0)

    def test_symmetrical_triangle_follows_trend(self):
        candles = candles_from_bounds(SYMMETRICAL_HIGHS, SYMMETRICAL_LOWS)
        patterns = TrianglePatternService().detect(candles)
        assert _names(patterns) == [PatternName.SYMMETRICAL_TRIANGLE]
        triangle = patterns[0]
        # last close 989.5 sits below the 20-bar mean close
        assert triangle.direction == PatternDirection.BEARISH
        assert triangle.confidence == 70
        midpoint = (990 + 318) / 2
        assert triangle.breakout_level == pytest.approx(midpoint * 0.995)
        assert triangle.target == pytest.approx(midpoint * 0.92)

    def test_needs_two_swings_each_side(self):
        candles = _candles_from_closes([100 + i for i in range(20)])
        assert TrianglePatternService().detect(candles) == []

    def test_window_is_trailing(self):
        noise = _candles_from_closes([50 + (i % 2) * 5 for i in range(40)])
        candles = noise + candles_from_bounds(ASCENDING_HIGHS, ASCENDING_LOWS)
        patterns = TrianglePatternService(lookback=20).detect(candles)
        assert _names(patterns) == [PatternName.ASCENDING_TRIANGLE]


# ╔══════════════════════════════════════════════════════════════╗
# ║  Reversals                                                  ║
# ╚══════════════════════════════════════════════════════════════╝

class TestDoubles:

    def test_double_top(self):
        patterns = ReversalPatternService().detect(candles_from_path(DOUBLE_TOP_PATH))
        assert _names(patterns) == [PatternName.DOUBLE_TOP]
        top = patterns[0]
        assert top.direction == PatternDirection.BEARISH
        assert top.confidence == 80
        assert top.breakout_level == pytest.approx(99 * 0.995)
        assert top.target == pytest.approx(99 * 0.90)

    def test_peaks_too_far_apart(self):
        # second peak high 105.45 is 5% below the first (111)
        path = DOUBLE_TOP_PATH[:16] + [101, 102, 103, 104, 104.45] + [103, 102, 101, 100, 99, 98, 97, 96, 95]
        patterns = ReversalPatternService().detect(candles_from_path(path))
        assert PatternName.DOUBLE_TOP not in _names(patterns)

    def test_double_bottom(self):
        path = [210 - p for p in DOUBLE_TOP_PATH]
        patterns = ReversalPatternService().detect(candles_from_path(path))
        assert _names(patterns) == [PatternName.DOUBLE_BOTTOM]
        bottom = patterns[0]
        assert bottom.direction == PatternDirection.BULLISH
        assert bottom.breakout_level == pytest.approx(111 * 1.005)
        assert bottom.target == pytest.approx(111 * 1.10)


class TestHeadAndShoulders:

    def test_head_and_shoulders(self):
        patterns = ReversalPatternService().detect(candles_from_path(HEAD_AND_SHOULDERS_PATH))
        assert _names(patterns) == [PatternName.HEAD_AND_SHOULDERS]
        hs = patterns[0]
        assert isinstance(hs, NecklinePattern)
        assert hs.confidence == 85
        assert hs.neckline == pytest.approx(99.0)
        assert hs.breakout_level == pytest.approx(99 * 0.995)
        assert hs.target == pytest.approx(77.0)

    def test_inverse_head_and_shoulders(self):
        path = [220 - p for p in HEAD_AND_SHOULDERS_PATH]
        patterns = ReversalPatternService().detect(candles_from_path(path))
        assert _names(patterns) == [PatternName.INVERSE_HEAD_AND_SHOULDERS]
        ihs = patterns[0]
        assert ihs.direction == PatternDirection.BULLISH
        assert ihs.neckline == pytest.approx(121.0)
        assert ihs.breakout_level == pytest.approx(121 * 1.005)
        assert ihs.target == pytest.approx(143.0)

    def test_head_must_be_highest(self):
        # raise the right shoulder above the head
        path = list(HEAD_AND_SHOULDERS_PATH)
        path[25] = 125
        patterns = ReversalPatternService().detect(candles_from_path(path))
        assert PatternName.HEAD_AND_SHOULDERS not in _names(patterns)


class TestCupAndHandle:

    def test_cup_and_handle(self):
        patterns = ReversalPatternService().detect(candles_from_path(CUP_AND_HANDLE_PATH))
        assert _names(patterns) == [PatternName.CUP_AND_HANDLE]
        cup = patterns[0]
        cup_depth = (100.5 - 79) / 100.5
        assert cup.breakout_level == pytest.approx(100 * 1.005)
        assert cup.target == pytest.approx(100 * (1 + cup_depth))

    def test_needs_forty_candles(self):
        patterns = ReversalPatternService().detect(candles_from_path(CUP_AND_HANDLE_PATH[-39:]))
        assert PatternName.CUP_AND_HANDLE not in _names(patterns)

    def test_shallow_cup_is_rejected(self):
        candles = candles_from_path([100.0] * 50)
        assert ReversalPatternService().detect(candles) == []


# ╔══════════════════════════════════════════════════════════════╗
# ║  Continuation                                               ║
# ╚══════════════════════════════════════════════════════════════╝

class TestFlags:

    def test_bull_flag(self):
        closes = [100 + 4 * i / 3 for i in range(16)] + [120 - 0.5 * k for k in range(1, 15)]
        patterns = ContinuationPatternService().detect(_candles_from_closes(closes))
        flag = next(p for p in patterns if p.pattern == PatternName.BULL_FLAG)
        assert isinstance(flag, FlagPattern)
        assert flag.confidence == 85
        assert flag.pole_move == pytest.approx(0.20)
        assert flag.retracement == pytest.approx(0.35)

    def test_bear_flag(self):
        closes = [100 - 4 * i / 3 for i in range(16)] + [80 + 0.5 * k for k in range(1, 15)]
        patterns = ContinuationPatternService().detect(_candles_from_closes(closes))
        flag = next(p for p in patterns if p.pattern == PatternName.BEAR_FLAG)
        assert flag.direction == PatternDirection.BEARISH
        assert flag.pole_move == pytest.approx(0.20)

    def test_deep_retracement_is_not_a_flag(self):
        closes = [100 + 4 * i / 3 for i in range(16)] + [120 - 1.0 * k for k in range(1, 15)]
        patterns = ContinuationPatternService().detect(_candles_from_closes(closes))
        assert PatternName.BULL_FLAG not in _names(patterns)

    def test_flagpole_measurement(self):
        service = ContinuationPatternService()
        closes = [100 + 4 * i / 3 for i in range(16)] + [120] * 14
        candles = _candles_from_closes(closes)
        assert service.detect_flagpole(candles, 30, PatternDirection.BULLISH) == pytest.approx(0.20)
        assert service.detect_flagpole(candles, 30, PatternDirection.BEARISH) is None


class TestPennants:

    @staticmethod
    def _pennant_candles(pole_end):
        step = (pole_end - 100) / 15
        pole = _candles_from_closes([100 + step * i for i in range(15)])
        wide = [Candle(open=pole_end, high=pole_end + 3, low=pole_end - 3, close=pole_end)] * 10
        tight = [Candle(open=pole_end, high=pole_end + 0.5, low=pole_end - 0.5, close=pole_end)] * 5
        return pole + wide + tight

    def test_bull_pennant_with_smaller_pole_than_flag(self):
        patterns = ContinuationPatternService().detect(self._pennant_candles(109))
        assert _names(patterns) == [PatternName.BULL_PENNANT]
        pennant = patterns[0]
        assert isinstance(pennant, PennantPattern)
        assert pennant.confidence == 80
        assert pennant.pole_move == pytest.approx(0.09)
        assert pennant.apex == 15

    def test_bear_pennant(self):
        patterns = ContinuationPatternService().detect(self._pennant_candles(91))
        assert _names(patterns) == [PatternName.BEAR_PENNANT]
        assert patterns[0].direction == PatternDirection.BEARISH

    @pytest.mark.parametrize("pole_end, expected", [
        (108, PatternName.BULL_PENNANT),
        (92, PatternName.BEAR_PENNANT),
    ])
    def test_pole_of_exactly_eight_percent(self, pole_end, expected):
        patterns = ContinuationPatternService().detect(self._pennant_candles(pole_end))
        assert _names(patterns) == [expected]
        assert patterns[0].pole_move == pytest.approx(0.08)

    def test_flag_pole_threshold_stays_strict(self):
        closes = [100 + 10 * i / 15 for i in range(15)] + [110] * 15
        service = ContinuationPatternService()
        assert service.detect_flagpole(_candles_from_closes(closes), 30, PatternDirection.BULLISH) is None

    def test_pennant_needs_compression(self):
        candles = self._pennant_candles(109)[:-5]
        candles += [Candle(open=109, high=112, low=106, close=109)] * 5
        assert ContinuationPatternService().detect(candles) == []


class TestWedges:

    def test_rising_wedge(self):
        patterns = ContinuationPatternService().detect(candles_from_bounds(WEDGE_HIGHS, WEDGE_LOWS))
        assert _names(patterns) == [PatternName.RISING_WEDGE]
        wedge = patterns[0]
        assert wedge.direction == PatternDirection.BEARISH
        assert wedge.confidence == 75
        assert wedge.breakout_level == pytest.approx(108 * 0.995)
        assert wedge.target == pytest.approx(108 * 0.92)

    def test_falling_wedge(self):
        highs = [220 - lo for lo in WEDGE_LOWS]
        lows = [220 - hi for hi in WEDGE_HIGHS]
        patterns = ContinuationPatternService().detect(candles_from_bounds(highs, lows))
        assert _names(patterns) == [PatternName.FALLING_WEDGE]
        wedge = patterns[0]
        assert wedge.direction == PatternDirection.BULLISH
        assert wedge.breakout_level == pytest.approx(112 * 1.005)
        assert wedge.target == pytest.approx(112 * 1.08)

    def test_wedge_needs_twenty_candles(self):
        candles = candles_from_bounds(WEDGE_HIGHS[1:], WEDGE_LOWS[1:])
        assert ContinuationPatternService().detect(candles) == []

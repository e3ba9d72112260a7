"""
Tests for indicator pack composition and trend classification.
"""

import pytest
from datetime import date, timedelta

from analysis.indicator_pack import (
    compute_indicators,
    classify_trend,
    IndicatorPack,
    InsufficientData,
    TREND_UP,
    TREND_DOWN,
    TREND_RANGE,
    TREND_UNKNOWN
)


def make_series(closes, start=date(2025, 1, 1)):
    """Build a canonical series with consecutive dates."""
    return [
        {'date': start + timedelta(days=i), 'close': float(c)}
        for i, c in enumerate(closes)
    ]


class TestClassifyTrend:
    """Tests for classify_trend function."""

    def test_trend_up(self):
        assert classify_trend(last=110, sma20=105, sma60=100) == TREND_UP

    def test_trend_down(self):
        assert classify_trend(last=90, sma20=95, sma60=100) == TREND_DOWN

    def test_trend_range_when_price_disagrees(self):
        """Averages up but price below sma20 is a range."""
        assert classify_trend(last=104, sma20=105, sma60=100) == TREND_RANGE

    def test_trend_unknown_without_sma60(self):
        assert classify_trend(last=110, sma20=105, sma60=None) == TREND_UNKNOWN


class TestComputeIndicators:
    """Tests for compute_indicators function."""

    def test_short_series_returns_insufficient(self):
        """Series shorter than min_points yields a typed result, not an error."""
        result = compute_indicators(make_series(range(10)), min_points=30)

        assert isinstance(result, InsufficientData)
        assert result.required == 30
        assert result.available == 10

    def test_empty_series_returns_insufficient(self):
        """Empty series is insufficient even with min_points 0."""
        result = compute_indicators([], min_points=0)

        assert isinstance(result, InsufficientData)
        assert result.available == 0

    def test_linear_series_hand_values(self):
        """Closes 10..30: ret20 = (30 - 10) / 10 = 200%, SMA20 = mean(11..30)."""
        series = make_series(range(10, 31))
        pack = compute_indicators(series, min_points=21)

        assert isinstance(pack, IndicatorPack)
        assert pack.count == 21
        assert pack.last == 30.0
        assert pack.ret20 == pytest.approx(200.0)
        assert pack.sma20 == pytest.approx(20.5)
        assert pack.boll_mid == pytest.approx(20.5)
        assert pack.as_of == series[-1]['date']

    def test_undefined_indicators_are_none(self):
        """Values needing more history than available are None, not NaN."""
        pack = compute_indicators(make_series(range(10, 31)), min_points=21)

        assert pack.sma60 is None
        assert pack.ret60 is None
        assert pack.trend == TREND_UNKNOWN
        assert pack.rsi14 == 100.0

    def test_rising_series_trends_up(self):
        """A steadily rising 120-point series is classified up."""
        pack = compute_indicators(make_series([100 + i for i in range(120)]), min_points=65)

        assert pack.trend == TREND_UP
        assert pack.sma20 > pack.sma60
        assert pack.ret60 is not None
        assert pack.macd_hist == pytest.approx(pack.macd - pack.macd_signal)

    def test_to_dict_serializes_date(self):
        """to_dict emits the as_of date as an ISO string."""
        pack = compute_indicators(make_series(range(10, 40)), min_points=30)
        result = pack.to_dict()

        assert result['as_of'] == pack.as_of.isoformat()
        assert set(result) >= {'last', 'sma20', 'rsi14', 'macd_hist', 'trend', 'ret20'}

"""
Indicator pack - composes technical indicators into a latest-point snapshot.
Pure function over a canonical series; never raises for short input.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import Dict, Any, List, Optional, Union

from analysis.calculations.indicators import (
    sma,
    macd,
    rsi,
    bollinger,
    last_defined
)
from analysis.calculations.returns import calculate_period_returns


DEFAULT_MIN_POINTS = 30

TREND_UP = 'up'
TREND_DOWN = 'down'
TREND_RANGE = 'range'
TREND_UNKNOWN = 'unknown'


@dataclass(frozen=True)
class IndicatorPack:
    """Indicator snapshot at the latest point of a series."""
    as_of: date
    count: int
    last: float
    sma20: Optional[float]
    sma60: Optional[float]
    macd: float
    macd_signal: float
    macd_hist: float
    rsi14: Optional[float]
    boll_upper: Optional[float]
    boll_mid: Optional[float]
    boll_lower: Optional[float]
    ret20: Optional[float]
    ret60: Optional[float]
    trend: str

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['as_of'] = self.as_of.isoformat()
        return result


@dataclass(frozen=True)
class InsufficientData:
    """Typed 'not enough data' result."""
    required: int
    available: int
    reason: str = 'insufficient history'

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def classify_trend(
    last: float,
    sma20: Optional[float],
    sma60: Optional[float]
) -> str:
    """
    Classify trend from the latest close and the 20/60 moving averages.

    Returns:
        'up', 'down', 'range', or 'unknown' if either average is undefined
    """
    if sma20 is None or sma60 is None:
        return TREND_UNKNOWN
    if sma20 > sma60 and last > sma20:
        return TREND_UP
    if sma20 < sma60 and last < sma20:
        return TREND_DOWN
    return TREND_RANGE


def compute_indicators(
    series: List[Dict[str, Any]],
    min_points: int = DEFAULT_MIN_POINTS
) -> Union[IndicatorPack, InsufficientData]:
    """
    Compute the indicator pack for the latest point of a series.

    Args:
        series: Canonical series of {'date', 'close'}, oldest first
        min_points: Minimum series length this caller requires

    Returns:
        IndicatorPack, or InsufficientData if the series is shorter than
        min_points (or empty)
    """
    required = max(1, min_points)
    if len(series) < required:
        return InsufficientData(required=required, available=len(series))

    closes = [row['close'] for row in series]

    macd_line, signal_line, hist = macd(closes)
    upper, middle, lower = bollinger(closes, 20, 2.0)
    returns = calculate_period_returns(closes, horizons=[20, 60])

    last = float(closes[-1])
    sma20 = last_defined(sma(closes, 20))
    sma60 = last_defined(sma(closes, 60))

    return IndicatorPack(
        as_of=series[-1]['date'],
        count=len(series),
        last=last,
        sma20=sma20,
        sma60=sma60,
        macd=float(macd_line[-1]),
        macd_signal=float(signal_line[-1]),
        macd_hist=float(hist[-1]),
        rsi14=last_defined(rsi(closes, 14)),
        boll_upper=last_defined(upper),
        boll_mid=last_defined(middle),
        boll_lower=last_defined(lower),
        ret20=returns['ret20'],
        ret60=returns['ret60'],
        trend=classify_trend(last, sma20, sma60)
    )

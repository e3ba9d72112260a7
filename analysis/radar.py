"""
Sector radar - momentum scoring and ranking of a proxy ETF universe.
Pure functions; fetching happens in pipeline.radar_scan.
"""

from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Sequence, Tuple, Union

from analysis.indicator_pack import (
    IndicatorPack,
    InsufficientData,
    TREND_UP,
    TREND_RANGE
)


RADAR_MIN_POINTS = 65
DEFAULT_TOP_N = 3
MAX_TOP_N = 8


@dataclass(frozen=True)
class RadarProxy:
    """A liquid instrument standing in for a sector or market."""
    symbol: str
    label: str


RADAR_UNIVERSE: Tuple[RadarProxy, ...] = (
    RadarProxy('XLK', 'Technology (US)'),
    RadarProxy('SMH', 'Semiconductors (US)'),
    RadarProxy('XLV', 'Health Care (US)'),
    RadarProxy('XLF', 'Financials (US)'),
    RadarProxy('XLE', 'Energy (US)'),
    RadarProxy('XLI', 'Industrials (US)'),
    RadarProxy('XLY', 'Consumer Discretionary (US)'),
    RadarProxy('XLP', 'Consumer Staples (US)'),
    RadarProxy('XLC', 'Communication Services (US)'),
    RadarProxy('XLU', 'Utilities (US)'),
    RadarProxy('KWEB', 'China Internet (KWEB)'),
    RadarProxy('VNM', 'Vietnam (VNM)'),
    RadarProxy('EWJ', 'Japan (EWJ)'),
    RadarProxy('EEM', 'Emerging Markets (EEM)'),
)


def _trend_component(trend: str) -> int:
    if trend == TREND_UP:
        return 4
    if trend == TREND_RANGE:
        return 2
    return 0


def _momentum_component(ret20: Optional[float]) -> int:
    if ret20 is None:
        return 0
    if ret20 >= 6:
        return 4
    if ret20 >= 2:
        return 3
    if ret20 >= 0:
        return 2
    return 0


def _rsi_component(rsi14: Optional[float]) -> int:
    # Peaks at RSI 60
    if rsi14 is None:
        return 0
    distance = abs(rsi14 - 60)
    if distance <= 5:
        return 3
    if distance <= 10:
        return 2
    return 1


def radar_score(pack: IndicatorPack) -> int:
    """
    Score an indicator pack on a 0-10 integer scale.

    Components:
    - Trend: up 4, range 2, down/unknown 0
    - Momentum (ret20): >= 6% 4, >= 2% 3, >= 0% 2, else 0
    - RSI distance from 60: <= 5 3, <= 10 2, else 1
    - MACD histogram: > 0 2, else 0

    Args:
        pack: Indicator snapshot

    Returns:
        Integer score clamped to [0, 10]
    """
    score = (
        _trend_component(pack.trend)
        + _momentum_component(pack.ret20)
        + _rsi_component(pack.rsi14)
        + (2 if pack.macd_hist > 0 else 0)
    )
    return int(round(min(10, max(0, score))))


def clamp_top_n(top_n: Optional[int]) -> int:
    """Clamp a requested result count to [1, 8]."""
    if top_n is None:
        return DEFAULT_TOP_N
    return min(MAX_TOP_N, max(1, int(top_n)))


def rank_proxies(
    scanned: Sequence[Tuple[RadarProxy, Union[IndicatorPack, InsufficientData, None]]],
    top_n: int = DEFAULT_TOP_N
) -> List[Dict[str, Any]]:
    """
    Rank scanned proxies by radar score.

    Proxies without an indicator pack (short history or failed fetch) are
    silently excluded. Ties keep input order.

    Args:
        scanned: Ordered (proxy, pack) pairs
        top_n: Number of rows to return, clamped to [1, 8]

    Returns:
        Rows of {label, symbol, score, trend, ret20, rsi14}, best first
    """
    rows = []
    for proxy, pack in scanned:
        if not isinstance(pack, IndicatorPack):
            continue
        rows.append({
            'label': proxy.label,
            'symbol': proxy.symbol,
            'score': radar_score(pack),
            'trend': pack.trend,
            'ret20': pack.ret20,
            'rsi14': pack.rsi14
        })

    # sorted() is stable, so equal scores keep universe order
    rows = sorted(rows, key=lambda r: r['score'], reverse=True)
    return rows[:clamp_top_n(top_n)]

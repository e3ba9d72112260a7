"""
Radar scan - fetches the proxy universe and ranks sector momentum.
Composes: Series fetch (per proxy, concurrent) -> Indicators -> Rank.
"""

import logging
from typing import Dict, Any, Callable, Optional, Sequence

from analysis.indicator_pack import compute_indicators
from analysis.radar import (
    RADAR_UNIVERSE,
    RADAR_MIN_POINTS,
    DEFAULT_TOP_N,
    RadarProxy,
    rank_proxies
)
from pipeline.series_fetch import get_series, STATUS_SUCCESS
from pipeline.workers import run_isolated

# Set up logger
logger = logging.getLogger(__name__)


RADAR_DAYS = 260


def run_radar_scan(
    top_n: int = DEFAULT_TOP_N,
    universe: Optional[Sequence[RadarProxy]] = None,
    fetch: Callable[..., Dict[str, Any]] = get_series,
    max_workers: Optional[int] = None
) -> Dict[str, Any]:
    """
    Scan the radar universe and return the top proxies.

    Every proxy is fetched on its own task. Proxies whose fetch fails or
    whose history is shorter than 65 points are excluded without affecting
    the others.

    Args:
        top_n: Number of proxies to return, clamped to [1, 8]
        universe: Proxies to scan (defaults to RADAR_UNIVERSE)
        fetch: Series collaborator with get_series' signature
        max_workers: Thread pool size

    Returns:
        Dictionary with status, items (ranked rows) and excluded
        [{symbol, reason}]
    """
    universe = tuple(universe) if universe is not None else RADAR_UNIVERSE

    def scan(proxy: RadarProxy):
        result = fetch('US_TICKER', proxy.symbol, min_points=RADAR_MIN_POINTS, days=RADAR_DAYS)
        if result['status'] != STATUS_SUCCESS:
            return None, result.get('reason') or f"insufficient history ({result.get('count', 0)})"
        return compute_indicators(result['series'], min_points=RADAR_MIN_POINTS), None

    scanned = []
    excluded = []
    for proxy, outcome, error in run_isolated(scan, universe, max_workers):
        if error is not None:
            excluded.append({'symbol': proxy.symbol, 'reason': str(error)})
            scanned.append((proxy, None))
            continue
        pack, reason = outcome
        if reason:
            excluded.append({'symbol': proxy.symbol, 'reason': reason})
        scanned.append((proxy, pack))

    items = rank_proxies(scanned, top_n)
    logger.info(f"Radar scanned {len(universe)} proxies, ranked {len(scanned) - len(excluded)}")

    return {
        'status': 'completed',
        'items': items,
        'excluded': excluded
    }

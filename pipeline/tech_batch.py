"""
Tech batch - indicator snapshots for every position in a portfolio.
Composes: Series fetch (per position, concurrent) -> Indicators.
"""

import logging
from typing import Dict, Any, Callable, List, Optional, Sequence

from analysis.indicator_pack import compute_indicators, IndicatorPack
from ingestion.transforms.normalizers import Position
from pipeline.series_fetch import get_series, STATUS_SUCCESS
from pipeline.workers import run_isolated, PipelineError

# Set up logger
logger = logging.getLogger(__name__)


TECH_MIN_POINTS = 65


def run_tech_batch(
    positions: Sequence[Position],
    days: int = 260,
    min_points: int = TECH_MIN_POINTS,
    fetch: Callable[..., Dict[str, Any]] = get_series,
    max_workers: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Compute indicator packs for each position.

    Args:
        positions: Portfolio positions
        days: Lookback passed to the series providers
        min_points: Minimum series length for a pack
        fetch: Series collaborator with get_series' signature
        max_workers: Thread pool size

    Returns:
        One row per position, in input order:
        {type, code, name, ok: True, count, ...pack} or
        {type, code, name, ok: False, reason, count?}

    Raises:
        PipelineError: If no positions are given
    """
    if not positions:
        raise PipelineError("positions required")

    def analyze(position: Position):
        result = fetch(position.type, position.code, min_points=min_points, days=days)
        if result['status'] != STATUS_SUCCESS:
            return result
        return compute_indicators(result['series'], min_points=min_points)

    rows = []
    for position, outcome, error in run_isolated(analyze, positions, max_workers):
        row = {'type': position.type, 'code': position.code, 'name': position.name}

        if error is not None:
            row.update({'ok': False, 'reason': str(error)})
        elif isinstance(outcome, IndicatorPack):
            row.update({'ok': True, **outcome.to_dict()})
        elif isinstance(outcome, dict):
            row.update({
                'ok': False,
                'reason': outcome.get('reason') or 'insufficient history',
                'count': outcome.get('count', 0)
            })
        else:
            row.update({'ok': False, 'reason': outcome.reason, 'count': outcome.available})

        rows.append(row)

    ok_count = sum(1 for r in rows if r['ok'])
    logger.info(f"Tech batch computed {ok_count} of {len(rows)} positions")
    return rows

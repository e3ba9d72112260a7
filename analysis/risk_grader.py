"""
Portfolio risk grader - concentration and drawdown traffic lights.
Deterministic threshold-based classification of a position list.
"""

import logging
from typing import Dict, Any, List, Optional, Sequence

from analysis.calculations.concentration import (
    position_weights,
    largest_weight,
    aggregate_theme_weights,
    rank_themes,
    herfindahl_index
)
from ingestion.transforms.normalizers import Position
from sentiment.theme_classifier import themes_for_position
from sentiment.theme_rules import UNIDENTIFIED_THEME

# Set up logger
logger = logging.getLogger(__name__)


LEVEL_HIGH = 'high'
LEVEL_MEDIUM = 'medium'
LEVEL_LOW = 'low'

SUGGESTED_EXPOSURE = {
    LEVEL_HIGH: 60,
    LEVEL_MEDIUM: 70,
    LEVEL_LOW: 80
}


def _pct(weight: float) -> float:
    return round(weight * 100, 1)


def classify_single_weight(weight: float) -> Optional[str]:
    """
    Classify the largest single-position weight.

    Thresholds:
    - High: >= 45%
    - Medium: >= 30%
    """
    if weight >= 0.45:
        return LEVEL_HIGH
    if weight >= 0.30:
        return LEVEL_MEDIUM
    return None


def classify_theme_weight(weight: float) -> Optional[str]:
    """
    Classify the top theme's aggregate weight.

    Thresholds:
    - High: >= 80%
    - Medium: >= 60%
    """
    if weight >= 0.80:
        return LEVEL_HIGH
    if weight >= 0.60:
        return LEVEL_MEDIUM
    return None


def classify_worst_pnl(pnl_pct: Optional[float]) -> Optional[str]:
    """
    Classify the worst position P&L (percent, -12.5 = -12.5%).

    Thresholds:
    - High: <= -15%
    - Medium: <= -8%
    """
    if pnl_pct is None:
        return None
    if pnl_pct <= -15:
        return LEVEL_HIGH
    if pnl_pct <= -8:
        return LEVEL_MEDIUM
    return None


def overall_level(flags: Sequence[Dict[str, Any]]) -> str:
    """High if any flag is high, else medium if any is medium, else low."""
    levels = {flag['level'] for flag in flags}
    if LEVEL_HIGH in levels:
        return LEVEL_HIGH
    if LEVEL_MEDIUM in levels:
        return LEVEL_MEDIUM
    return LEVEL_LOW


def grade_risk(positions: Sequence[Position]) -> Dict[str, Any]:
    """
    Grade portfolio risk from concentration and drawdown.

    Three independent flags are raised: largest single weight, top theme
    weight and worst P&L among positions that report one. Positions with no
    detected theme count towards the 'Unidentified' theme.

    Args:
        positions: Portfolio positions

    Returns:
        RiskReport dictionary with risk_level, suggested_exposure,
        top_theme {name, pct}, items [{level, title, detail}],
        theme_weights, positions and hhi
    """
    if not positions:
        return {
            'risk_level': LEVEL_LOW,
            'suggested_exposure': SUGGESTED_EXPOSURE[LEVEL_LOW],
            'top_theme': {'name': None, 'pct': 0.0},
            'items': [],
            'theme_weights': [],
            'positions': [],
            'hhi': None
        }

    weights = position_weights(positions)
    detected = [themes_for_position(p) for p in positions]

    max_weight, max_holder = largest_weight(positions, weights)

    ranked = rank_themes(aggregate_theme_weights(detected, weights, fallback=UNIDENTIFIED_THEME))
    top_name, top_weight = ranked[0]

    with_pnl = [p for p in positions if p.pnl_pct is not None]
    worst = min(with_pnl, key=lambda p: p.pnl_pct) if with_pnl else None

    items: List[Dict[str, Any]] = []

    level = classify_single_weight(max_weight)
    if level:
        items.append({
            'level': level,
            'title': 'Single position concentration',
            'detail': f"{max_holder.code or max_holder.name} is {_pct(max_weight)}% of the portfolio"
        })

    level = classify_theme_weight(top_weight)
    if level:
        items.append({
            'level': level,
            'title': 'Theme concentration',
            'detail': f"Top theme '{top_name}' is {_pct(top_weight)}% of the portfolio"
        })

    level = classify_worst_pnl(worst.pnl_pct if worst else None)
    if level:
        items.append({
            'level': level,
            'title': 'Drawdown',
            'detail': f"Worst position {worst.code or worst.name} at {worst.pnl_pct:.2f}%"
        })

    risk_level = overall_level(items)
    logger.info(f"Graded {len(positions)} positions as {risk_level} risk ({len(items)} flags)")

    return {
        'risk_level': risk_level,
        'suggested_exposure': SUGGESTED_EXPOSURE[risk_level],
        'top_theme': {'name': top_name, 'pct': _pct(top_weight)},
        'items': items,
        'theme_weights': [{'theme': t, 'weight': w} for t, w in ranked],
        'positions': [
            {'code': p.code, 'name': p.name, 'weight': w, 'themes': themes}
            for p, w, themes in zip(positions, weights, detected)
        ],
        'hhi': herfindahl_index(weights)
    }

"""
Portfolio concentration calculation utilities.
Pure functions for position and theme weights.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ingestion.transforms.normalizers import Position


def position_weights(positions: Sequence[Position]) -> List[float]:
    """
    Normalize position values into portfolio weights.

    A position's value is its market value if positive, else its amount if
    positive, else 0.

    Args:
        positions: Portfolio positions

    Returns:
        Weights in input order; all zeros when the portfolio has no value
    """
    values = [p.value for p in positions]
    total = sum(values)
    if total <= 0:
        return [0.0 for _ in values]
    return [v / total for v in values]


def largest_weight(
    positions: Sequence[Position],
    weights: Sequence[float]
) -> Tuple[float, Optional[Position]]:
    """
    Find the single largest weight and its holder (first one on ties).

    Returns:
        Tuple of (weight, position), or (0.0, None) for an empty portfolio
    """
    if not positions:
        return 0.0, None

    top_idx = 0
    for i, w in enumerate(weights):
        if w > weights[top_idx]:
            top_idx = i
    return weights[top_idx], positions[top_idx]


def aggregate_theme_weights(
    themes_per_position: Sequence[Sequence[str]],
    weights: Sequence[float],
    fallback: Optional[str] = None
) -> Dict[str, float]:
    """
    Accumulate position weights per theme.

    A position tagged with several themes splits its weight evenly across
    them. Positions without a theme go to `fallback` when given, otherwise
    they contribute nothing.

    Args:
        themes_per_position: Detected themes for each position
        weights: Portfolio weight for each position
        fallback: Theme name for positions with no detected theme

    Returns:
        Dictionary mapping theme to aggregate weight, in first-seen order
    """
    theme_weights: Dict[str, float] = {}

    for themes, w in zip(themes_per_position, weights):
        if not themes:
            if fallback is None:
                continue
            themes = [fallback]

        share = w / len(themes)
        for theme in themes:
            theme_weights[theme] = theme_weights.get(theme, 0.0) + share

    return theme_weights


def rank_themes(theme_weights: Dict[str, float]) -> List[Tuple[str, float]]:
    """Sort themes by descending weight, stable on ties."""
    return sorted(theme_weights.items(), key=lambda x: x[1], reverse=True)


def herfindahl_index(weights: Sequence[float]) -> float:
    """
    Calculate the Herfindahl-Hirschman Index of portfolio weights.

    HHI = sum(w_i^2); 1 / n for an equal-weight book, 1 for a single holding.
    """
    return sum(w ** 2 for w in weights)

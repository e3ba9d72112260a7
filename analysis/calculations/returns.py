"""
Returns calculation utilities.
Pure functions for percent change over trading day horizons.
"""

from typing import List, Dict, Optional, Sequence


class ReturnsError(Exception):
    """Raised when returns calculation fails."""
    pass


def pct_change(closes: Sequence[float], horizon: int) -> Optional[float]:
    """
    Percent change from `horizon` points back to the most recent close.

    Formula: ((P_last - P_{last-h}) / P_{last-h}) * 100

    Args:
        closes: Closes in chronological order
        horizon: Number of points to look back

    Returns:
        Percent change (12.3 = 12.3%), or None if n <= horizon or the base
        close is zero

    Raises:
        ReturnsError: If horizon is not positive
    """
    if horizon <= 0:
        raise ReturnsError("Horizon must be positive")

    n = len(closes)
    if n <= horizon:
        return None

    base = closes[n - 1 - horizon]
    if base == 0:
        return None

    return ((closes[-1] - base) / base) * 100


def calculate_period_returns(
    closes: Sequence[float],
    horizons: List[int] = [20, 60]
) -> Dict[str, Optional[float]]:
    """
    Calculate percent changes for multiple horizons.

    Args:
        closes: Closes in chronological order
        horizons: Horizons in trading days

    Returns:
        Dictionary mapping 'ret{h}' to percent change (or None if
        insufficient data)
    """
    return {f"ret{h}": pct_change(closes, h) for h in horizons}

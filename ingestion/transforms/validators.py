"""
Core validators for canonical series rows.
Pure functions - no IO, network, or side effects.
"""

import math
from datetime import date
from typing import Dict, Any, List


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


def validate_price_point(row: Dict[str, Any]) -> None:
    """
    Validate a canonical price point.

    Args:
        row: Dictionary with 'date' and 'close'

    Raises:
        ValidationError: If validation fails
    """
    missing = {'date', 'close'} - set(row.keys())
    if missing:
        raise ValidationError(f"Missing required keys: {missing}")

    if not isinstance(row['date'], date):
        raise ValidationError(f"date must be date, got {type(row['date'])}")

    close = row['close']
    if not isinstance(close, (int, float)) or isinstance(close, bool):
        raise ValidationError(f"close must be numeric, got {type(close)}")

    if not math.isfinite(close):
        raise ValidationError(f"close must be finite, got {close}")


def check_series_monotonicity(series: List[Dict[str, Any]]) -> None:
    """
    Check that series dates are strictly increasing.

    Args:
        series: List of price points with 'date' fields

    Raises:
        ValidationError: If dates repeat or go backwards
    """
    for i in range(1, len(series)):
        prev_date = series[i - 1]['date']
        cur_date = series[i]['date']
        if cur_date == prev_date:
            raise ValidationError(f"Duplicate date found in series: {cur_date}")
        if cur_date < prev_date:
            raise ValidationError(
                f"Series dates not monotonic: {prev_date} >= {cur_date}"
            )


def validate_series(series: List[Dict[str, Any]]) -> None:
    """Validate every point and the date ordering of a series."""
    for row in series:
        validate_price_point(row)
    check_series_monotonicity(series)

"""
Normalizers for transforming provider data to canonical shape.
Pure functions - no IO, network, or side effects.
Minimal normalization - only when necessary.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Any, List, Optional

from ingestion.transforms.validators import validate_series


POSITION_TYPES = ('CN_FUND', 'US_TICKER')


@dataclass
class Position:
    """A portfolio holding as supplied by the caller."""
    type: str
    code: str
    name: str = ''
    amount: Optional[float] = None
    mv: Optional[float] = None
    pnl_pct: Optional[float] = None
    theme: Optional[str] = None

    @property
    def value(self) -> float:
        """Market value if positive, else amount if positive, else 0."""
        if self.mv is not None and self.mv > 0:
            return self.mv
        if self.amount is not None and self.amount > 0:
            return self.amount
        return 0.0

    @property
    def label(self) -> str:
        return f"{self.name} {self.code}".strip()


def safe_number(value: Any) -> Optional[float]:
    """
    Parse a provider number, returning None for anything non-finite.

    Args:
        value: Raw value (str, int, float, None)

    Returns:
        Finite float or None
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_date(raw: Any) -> Optional[date]:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            return date.fromisoformat(raw.strip()[:10])
        except ValueError:
            return None
    return None


def _build_series(
    raw_rows: List[Dict[str, Any]],
    date_field: str,
    close_field: str
) -> List[Dict[str, Any]]:
    seen_dates: Dict[date, Dict[str, Any]] = {}

    for raw in raw_rows:
        row_date = _parse_date(raw.get(date_field))
        close = safe_number(raw.get(close_field))

        # Rows without a date or a usable close never reach the indicators
        if row_date is None or close is None:
            continue

        # Deduplicate by date, keeping the latest correction
        seen_dates[row_date] = {'date': row_date, 'close': close}

    series = list(seen_dates.values())
    validate_series(series)
    return series


def normalize_fund_nav(raw_rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Transform Eastmoney fund NAV rows to a canonical series.

    The provider returns newest-first; the series is reversed to oldest-first.
    NAV date lives in 'FSRQ' and unit NAV in 'DWJZ'.

    Args:
        raw_rows: Provider 'LSJZList' rows

    Returns:
        List of {'date', 'close'} dictionaries, ascending by date

    Raises:
        ValidationError: If the reversed payload is still not ascending
    """
    if not raw_rows:
        return []

    return _build_series(list(reversed(raw_rows)), 'FSRQ', 'DWJZ')


def normalize_daily_bars(raw_rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Transform daily bar rows to a canonical series.

    The provider returns oldest-first, so row order is kept.

    Args:
        raw_rows: Rows with 'Date' and 'Close'

    Returns:
        List of {'date', 'close'} dictionaries, ascending by date

    Raises:
        ValidationError: If the payload is not ascending
    """
    if not raw_rows:
        return []

    return _build_series(raw_rows, 'Date', 'Close')


def normalize_positions(raw_positions: List[Dict[str, Any]]) -> List[Position]:
    """
    Transform caller-supplied position dictionaries to Position objects.

    Accepts camelCase ('pnlPct') or snake_case ('pnl_pct') keys.
    Positions with neither a code nor a name are skipped.

    Args:
        raw_positions: Raw position dictionaries

    Returns:
        List of Position objects in input order
    """
    positions = []

    for raw in raw_positions or []:
        if not isinstance(raw, dict):
            continue

        code = str(raw.get('code') or '').strip()
        name = str(raw.get('name') or '').strip()
        if not code and not name:
            continue

        pnl_raw = raw.get('pnl_pct', raw.get('pnlPct'))
        theme = raw.get('theme')

        positions.append(Position(
            type=str(raw.get('type') or '').strip(),
            code=code,
            name=name,
            amount=safe_number(raw.get('amount')),
            mv=safe_number(raw.get('mv')),
            pnl_pct=safe_number(pnl_raw),
            theme=str(theme).strip() if theme else None,
        ))

    return positions

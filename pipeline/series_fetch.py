"""
Series fetch - composes provider adapters with normalizers.
Composes: Provider -> Normalize -> Validate, with failures returned as values.
"""

import logging
from typing import Dict, Any

from ingestion.providers.eastmoney_fund_adapter import fetch_fund_history
from ingestion.providers.yfinance_adapter import fetch_daily_bars
from ingestion.transforms.normalizers import normalize_fund_nav, normalize_daily_bars

# Set up logger
logger = logging.getLogger(__name__)


STATUS_SUCCESS = 'success'
STATUS_INSUFFICIENT = 'insufficient'
STATUS_FAILED = 'failed'


def get_series(
    instrument_type: str,
    code: str,
    min_points: int = 30,
    days: int = 260
) -> Dict[str, Any]:
    """
    Fetch and normalize the close series for one instrument.

    Upstream and payload errors are caught and reported, never raised.

    Args:
        instrument_type: 'CN_FUND' or 'US_TICKER'
        code: Fund code or ticker symbol
        min_points: Minimum usable series length
        days: Lookback in points passed to the provider

    Returns:
        {'status': 'success', 'series': [...]},
        {'status': 'insufficient', 'count': n} or
        {'status': 'failed', 'reason': str}
    """
    try:
        if instrument_type == 'CN_FUND':
            series = normalize_fund_nav(fetch_fund_history(code, days=days))
        elif instrument_type == 'US_TICKER':
            series = normalize_daily_bars(fetch_daily_bars(code, days=days))
        else:
            return {'status': STATUS_FAILED, 'reason': f"unsupported instrument type '{instrument_type}'"}
    except Exception as e:
        logger.warning(f"Series fetch failed for {instrument_type} {code}: {e}")
        return {'status': STATUS_FAILED, 'reason': str(e)}

    if len(series) < min_points:
        logger.info(f"Insufficient history for {code}: {len(series)} < {min_points}")
        return {'status': STATUS_INSUFFICIENT, 'count': len(series)}

    return {'status': STATUS_SUCCESS, 'series': series}

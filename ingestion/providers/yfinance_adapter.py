"""
yfinance adapter - fetch daily bars for US tickers and ETFs.
Network IO allowed here, but minimal business logic.
"""

import math
import yfinance as yf
import pandas as pd
from datetime import date, timedelta
from typing import Dict, Any, List


MIN_DAYS = 60
MAX_DAYS = 520


class YFinanceError(Exception):
    """Raised when yfinance operations fail."""
    pass


def fetch_daily_bars(symbol: str, days: int = 260) -> List[Dict[str, Any]]:
    """
    Fetch the most recent daily bars for a symbol.
    Returns raw data in provider format - no normalization.

    Args:
        symbol: Ticker symbol (e.g., 'XLK')
        days: Number of trading days wanted, clamped to [60, 520]

    Returns:
        List of raw rows {'Date': 'YYYY-MM-DD', 'Close': float}, oldest first

    Raises:
        YFinanceError: If fetch fails or validation fails
    """
    _validate_ticker(symbol)
    days = clamp_days(days)

    # Calendar window wide enough to cover weekends and holidays
    end = date.today()
    start = end - timedelta(days=math.ceil(days * 7 / 5) + 10)

    try:
        # yfinance uses exclusive end dates, so add 1 day
        data = yf.download(
            symbol.upper(),
            start=start.isoformat(),
            end=(end + timedelta(days=1)).isoformat(),
            progress=False,
            auto_adjust=False
        )
    except Exception as e:
        raise YFinanceError(f"Failed to fetch bars for {symbol}: {str(e)}") from e

    if data is None or len(data) == 0:
        return []

    # Flatten multi-level columns (ticker-specific columns)
    if isinstance(data.columns, pd.MultiIndex):
        data.columns = data.columns.get_level_values(0)

    if 'Close' not in data.columns:
        raise YFinanceError(f"No Close column in response for {symbol}")

    rows = []
    for date_idx, row in data.iterrows():
        if pd.isna(row['Close']):
            continue
        rows.append({
            'Date': date_idx.strftime('%Y-%m-%d'),
            'Close': float(row['Close'])
        })

    return rows[-days:]


def clamp_days(days: int) -> int:
    """Clamp the requested lookback to the supported window."""
    return min(MAX_DAYS, max(MIN_DAYS, int(days)))


def _validate_ticker(ticker: str) -> None:
    """
    Basic ticker validation.

    Args:
        ticker: Stock ticker symbol

    Raises:
        YFinanceError: If ticker is invalid
    """
    if not ticker or not isinstance(ticker, str):
        raise YFinanceError("Ticker must be non-empty string")

    if len(ticker) > 10:
        raise YFinanceError("Ticker too long (max 10 characters)")

    # Allow alphanumeric plus common ticker chars
    allowed_chars = set('ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.-^=')
    if not set(ticker.upper()).issubset(allowed_chars):
        raise YFinanceError(f"Ticker contains invalid characters: {ticker}")

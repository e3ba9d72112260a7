"""
Eastmoney adapter - fetch historical NAV for mainland China funds.
Network IO allowed here, but minimal business logic.
"""

import os
import re
import json
import time
import requests
from typing import Dict, Any, List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


LSJZ_URL = 'https://api.fund.eastmoney.com/f10/lsjz'
MIN_DAYS = 30
MAX_DAYS = 260

_FUND_CODE = re.compile(r'^\d{6}$')
_JSONP_BODY = re.compile(r'cb\((\{.*\})\)', re.S)


class EastmoneyError(Exception):
    """Raised when Eastmoney operations fail."""
    pass


def fetch_fund_history(code: str, days: int = 180) -> List[Dict[str, Any]]:
    """
    Fetch historical unit NAV rows for a fund.
    Returns raw rows in provider format (newest first) - no normalization.

    Args:
        code: Six digit fund code (e.g., '012922')
        days: Number of NAV points wanted, clamped to [30, 260]

    Returns:
        List of raw 'LSJZList' rows with 'FSRQ' (date) and 'DWJZ' (NAV)

    Raises:
        EastmoneyError: If the code is invalid, the fetch fails or the
            payload cannot be unwrapped
    """
    code = str(code or '').strip()
    if not _FUND_CODE.match(code):
        raise EastmoneyError(f"Fund code must be 6 digits, got '{code}'")

    days = clamp_days(days)
    timeout = int(os.getenv('REQUESTS_TIMEOUT_S', '12'))

    params = {
        'fundCode': code,
        'pageIndex': 1,
        'pageSize': days,
        'callback': 'cb',
        '_': int(time.time() * 1000)
    }
    headers = {'Referer': 'https://fundf10.eastmoney.com/'}

    try:
        response = requests.get(LSJZ_URL, params=params, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise EastmoneyError(f"Eastmoney history fetch failed for {code}: {e}") from e

    if response.status_code != 200:
        raise EastmoneyError(
            f"Eastmoney history fetch failed for {code}: HTTP {response.status_code}"
        )

    return parse_lsjz_jsonp(response.text)


def parse_lsjz_jsonp(text: str) -> List[Dict[str, Any]]:
    """
    Unwrap the 'cb(...)' JSONP envelope and return the NAV rows.

    Args:
        text: Raw response body

    Returns:
        List of 'LSJZList' rows (empty if the fund has no history)

    Raises:
        EastmoneyError: If the envelope or JSON body is malformed
    """
    match = _JSONP_BODY.search(text or '')
    if not match:
        raise EastmoneyError("Eastmoney history format error: no JSONP envelope")

    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise EastmoneyError(f"Eastmoney history format error: {e}") from e

    data = payload.get('Data') or {}
    return list(data.get('LSJZList') or [])


def clamp_days(days: int) -> int:
    """Clamp the requested lookback to the supported window."""
    return min(MAX_DAYS, max(MIN_DAYS, int(days)))

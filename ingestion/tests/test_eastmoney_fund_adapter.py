"""
Tests for Eastmoney fund NAV adapter - mocked HTTP, no live API hits in CI.
"""

import json
import pytest
import requests
from unittest.mock import Mock, patch

from ingestion.providers.eastmoney_fund_adapter import (
    fetch_fund_history,
    parse_lsjz_jsonp,
    clamp_days,
    EastmoneyError,
    LSJZ_URL
)


SAMPLE_ROWS = [
    {'FSRQ': '2025-06-30', 'DWJZ': '1.2500', 'LJJZ': '1.3100'},
    {'FSRQ': '2025-06-27', 'DWJZ': '1.2400', 'LJJZ': '1.3000'},
]


def jsonp(rows):
    body = {'Data': {'LSJZList': rows}, 'ErrCode': 0, 'TotalCount': len(rows)}
    return f"cb({json.dumps(body)})"


class TestParseLsjzJsonp:
    """Tests for parse_lsjz_jsonp function."""

    def test_parse_rows(self):
        assert parse_lsjz_jsonp(jsonp(SAMPLE_ROWS)) == SAMPLE_ROWS

    def test_parse_null_data(self):
        """Funds with no history come back with Data null."""
        assert parse_lsjz_jsonp('cb({"Data": null, "ErrCode": 0})') == []

    def test_parse_missing_envelope(self):
        with pytest.raises(EastmoneyError, match="no JSONP envelope"):
            parse_lsjz_jsonp('<html>blocked</html>')

    def test_parse_bad_json(self):
        with pytest.raises(EastmoneyError, match="format error"):
            parse_lsjz_jsonp('cb({"Data": {oops}})')


class TestFetchFundHistory:
    """Tests for fetch_fund_history function."""

    @patch('ingestion.providers.eastmoney_fund_adapter.requests.get')
    def test_fetch_success(self, mock_get):
        mock_get.return_value = Mock(status_code=200, text=jsonp(SAMPLE_ROWS))

        result = fetch_fund_history('012922', days=120)

        assert result == SAMPLE_ROWS
        args, kwargs = mock_get.call_args
        assert args == (LSJZ_URL,)
        assert kwargs['params']['fundCode'] == '012922'
        assert kwargs['params']['pageSize'] == 120
        assert kwargs['params']['callback'] == 'cb'
        assert 'Referer' in kwargs['headers']

    @patch('ingestion.providers.eastmoney_fund_adapter.requests.get')
    def test_fetch_clamps_page_size(self, mock_get):
        mock_get.return_value = Mock(status_code=200, text=jsonp([]))

        fetch_fund_history('012922', days=1000)

        assert mock_get.call_args[1]['params']['pageSize'] == 260

    @patch('ingestion.providers.eastmoney_fund_adapter.requests.get')
    def test_fetch_http_error(self, mock_get):
        mock_get.return_value = Mock(status_code=503, text='')

        with pytest.raises(EastmoneyError, match="HTTP 503"):
            fetch_fund_history('012922')

    @patch('ingestion.providers.eastmoney_fund_adapter.requests.get')
    def test_fetch_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("reset")

        with pytest.raises(EastmoneyError, match="fetch failed for 012922"):
            fetch_fund_history('012922')

    def test_invalid_code(self):
        """Codes must be six digits; no request is made."""
        with pytest.raises(EastmoneyError, match="6 digits"):
            fetch_fund_history('SPY')

    def test_clamp_days(self):
        assert clamp_days(5) == 30
        assert clamp_days(500) == 260

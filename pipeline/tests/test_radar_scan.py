"""
Tests for the radar scan pipeline with a stubbed series fetch.
"""

from datetime import date, timedelta

from analysis.radar import RadarProxy
from pipeline.radar_scan import run_radar_scan, RADAR_DAYS
from pipeline.series_fetch import STATUS_SUCCESS, STATUS_INSUFFICIENT, STATUS_FAILED


def make_series(closes):
    start = date(2025, 1, 1)
    return [{'date': start + timedelta(days=i), 'close': float(c)} for i, c in enumerate(closes)]


RISING = make_series([100 + i * 0.5 for i in range(120)])
FALLING = make_series([200 - i * 0.5 for i in range(120)])

UNIVERSE = (
    RadarProxy('DOWN', 'Falling'),
    RadarProxy('UP', 'Rising'),
    RadarProxy('SHORT', 'New listing'),
    RadarProxy('ERR', 'Broken feed'),
    RadarProxy('BOOM', 'Raises'),
)


def stub_fetch(instrument_type, code, min_points=30, days=260):
    assert instrument_type == 'US_TICKER'
    assert min_points == 65 and days == RADAR_DAYS
    if code == 'UP':
        return {'status': STATUS_SUCCESS, 'series': RISING}
    if code == 'DOWN':
        return {'status': STATUS_SUCCESS, 'series': FALLING}
    if code == 'SHORT':
        return {'status': STATUS_INSUFFICIENT, 'count': 40}
    if code == 'ERR':
        return {'status': STATUS_FAILED, 'reason': 'HTTP 500'}
    raise RuntimeError('connection reset')


class TestRunRadarScan:
    """Tests for run_radar_scan function."""

    def test_ranks_and_excludes(self):
        result = run_radar_scan(top_n=8, universe=UNIVERSE, fetch=stub_fetch, max_workers=2)

        assert result['status'] == 'completed'
        assert [r['symbol'] for r in result['items']] == ['UP', 'DOWN']
        assert result['items'][0]['trend'] == 'up'
        assert result['items'][0]['score'] > result['items'][1]['score']

        excluded = {e['symbol']: e['reason'] for e in result['excluded']}
        assert set(excluded) == {'SHORT', 'ERR', 'BOOM'}
        assert excluded['ERR'] == 'HTTP 500'
        assert excluded['BOOM'] == 'connection reset'
        assert '40' in excluded['SHORT']

    def test_top_n_clamped(self):
        result = run_radar_scan(top_n=1, universe=UNIVERSE, fetch=stub_fetch)

        assert [r['symbol'] for r in result['items']] == ['UP']

    def test_all_failures_give_empty_ranking(self):
        def failing(*args, **kwargs):
            raise RuntimeError('offline')

        result = run_radar_scan(universe=UNIVERSE, fetch=failing)

        assert result['items'] == []
        assert len(result['excluded']) == len(UNIVERSE)

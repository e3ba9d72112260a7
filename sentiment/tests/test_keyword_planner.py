"""
Tests for keyword planning and quota allocation.
"""

import pytest

from ingestion.transforms.normalizers import Position
from sentiment.keyword_planner import (
    plan_keywords,
    allocate_quota,
    detect_portfolio_themes,
    clean_keyword,
    theme_contribution,
    KeywordPlanError,
    MAX_KEYWORDS,
    MAX_KEYWORD_LENGTH
)
from sentiment.theme_rules import GLOBAL_GROWTH_US, HK_TECH, CHINA_HARD_TECH


SPY = Position('US_TICKER', 'SPY', 'S&P 500', mv=1000)


def broad_portfolio():
    """Positions spanning every theme, enough to overflow the keyword cap."""
    names = [
        ('012922', '恒生科技指数'), ('588000', '科创50 半导体'), ('QQQ', '纳斯达克100'),
        ('VNM', '越南'), ('EWJ', '日经'), ('006228', '医药 创新药'),
        ('516160', '新能源 光伏'), ('XLE', '原油'), ('XLF', '银行 证券'),
    ]
    return [Position('US_TICKER', code, name, mv=100) for code, name in names]


class TestDetectPortfolioThemes:
    """Tests for detect_portfolio_themes function."""

    def test_single_theme(self):
        assert detect_portfolio_themes([SPY]) == {GLOBAL_GROWTH_US: 1.0}

    def test_weights_renormalized(self):
        """Untagged positions do not dilute detected themes."""
        positions = [
            Position('CN_FUND', '012922', '恒生科技', amount=300),
            Position('US_TICKER', 'ZZZ', mv=700),
        ]

        assert detect_portfolio_themes(positions) == {HK_TECH: 1.0}

    def test_fallback_when_nothing_detected(self):
        positions = [Position('US_TICKER', 'ZZZ', mv=100)]

        assert detect_portfolio_themes(positions) == {GLOBAL_GROWTH_US: 1.0}

    def test_dictionary_order(self):
        positions = [
            Position('US_TICKER', 'SMH', '半导体', mv=700),
            Position('CN_FUND', '012922', '恒生科技', mv=300),
        ]

        assert list(detect_portfolio_themes(positions)) == [HK_TECH, CHINA_HARD_TECH]

    def test_unvalued_positions_keep_detected_themes(self):
        """Positions without mv or amount are weighed equally."""
        positions = [
            Position('CN_FUND', '012922', '恒生科技ETF联接'),
            Position('CN_FUND', '013403', '半导体芯片ETF联接'),
        ]

        result = detect_portfolio_themes(positions)

        assert set(result) == {HK_TECH, CHINA_HARD_TECH}
        assert result[HK_TECH] == pytest.approx(0.5)
        assert result[CHINA_HARD_TECH] == pytest.approx(0.5)
        assert plan_keywords(positions)['themes'] == [HK_TECH, CHINA_HARD_TECH]


class TestPlanKeywords:
    """Tests for plan_keywords function."""

    def test_single_spy_position(self):
        """S&P 500 holding maps wholly to Global Growth & US."""
        plan = plan_keywords([SPY])

        assert plan['themes'] == [GLOBAL_GROWTH_US]
        assert plan['theme_weights'] == {GLOBAL_GROWTH_US: 1.0}
        assert sum(plan['weights'].values()) == pytest.approx(1.0, abs=1e-9)

        # Macro and theme keywords are both present
        assert '人民币 汇率' in plan['keywords']
        assert '纳斯达克' in plan['keywords']

        # Instrument match adds to the theme keyword it repeats
        assert plan['keywords'][0] == '标普500'
        assert plan['keywords'][1] == '美联储'
        assert plan['weights']['标普500'] == pytest.approx(1.5 / 6.175)

    def test_broad_keywords_discounted(self):
        plan = plan_keywords([SPY])

        assert plan['weights']['美股'] < plan['weights']['非农']
        assert plan['weights']['A股 市场'] < plan['weights']['人民币 汇率']

    def test_bucket_is_first_contribution(self):
        plan = plan_keywords([SPY])

        assert '美联储' in plan['buckets']['macro']
        assert '标普500' in plan['buckets']['theme']
        assert plan['buckets']['instrument'] == []

    def test_instrument_bucket(self):
        plan = plan_keywords([Position('US_TICKER', 'NVDA', 'NVIDIA', mv=100)])

        assert '英伟达' in plan['keywords']
        assert '半导体 指数' not in plan['keywords']

    def test_keyword_cap_and_invariants(self):
        """Large plans are capped at 28 unique keywords summing to 1."""
        plan = plan_keywords(broad_portfolio())
        keywords = plan['keywords']

        assert len(keywords) == MAX_KEYWORDS
        assert len({k.lower() for k in keywords}) == len(keywords)
        assert sum(plan['weights'].values()) == pytest.approx(1.0, abs=1e-9)
        assert all(len(k) <= MAX_KEYWORD_LENGTH for k in keywords)
        assert set(plan['weights']) == set(keywords)

    def test_keywords_sorted_by_weight(self):
        plan = plan_keywords(broad_portfolio())
        weights = [plan['weights'][k] for k in plan['keywords']]

        assert weights == sorted(weights, reverse=True)

    def test_empty_positions_raises(self):
        with pytest.raises(KeywordPlanError, match="No positions"):
            plan_keywords([])


class TestHelpers:
    """Tests for keyword helpers."""

    def test_clean_keyword(self):
        assert clean_keyword('  美联储   利率 ') == '美联储 利率'
        assert len(clean_keyword('x' * 50)) == MAX_KEYWORD_LENGTH
        assert clean_keyword('') == ''

    def test_theme_contribution(self):
        assert theme_contribution(1.0) == pytest.approx(0.75)
        assert theme_contribution(0.0) == pytest.approx(0.15)


class TestAllocateQuota:
    """Tests for allocate_quota function."""

    def test_weighted_sum_equals_limit(self):
        plan = plan_keywords(broad_portfolio())

        for limit in (0, 1, 2, 5, 30, 57, 200):
            quotas = allocate_quota(plan['keywords'], limit, plan['weights'])
            assert sum(quotas.values()) == limit
            assert all(q >= 0 for q in quotas.values())
            assert set(quotas) == set(plan['keywords'])

    def test_remainder_goes_to_heaviest(self):
        weights = {'a': 0.4, 'b': 0.3, 'c': 0.2, 'd': 0.1}

        assert allocate_quota(['a', 'b', 'c', 'd'], 2, weights) == {'a': 1, 'b': 1, 'c': 0, 'd': 0}

    def test_top_three_lifted_to_one(self):
        """Top three keywords get at least one item, taken from the largest quota."""
        weights = {'a': 0.97, 'b': 0.01, 'c': 0.01, 'd': 0.01}

        quotas = allocate_quota(['a', 'b', 'c', 'd'], 10, weights)

        assert quotas == {'a': 8, 'b': 1, 'c': 1, 'd': 0}

    def test_even_split_without_weights(self):
        assert allocate_quota(['a', 'b', 'c'], 7) == {'a': 3, 'b': 2, 'c': 2}

    def test_zero_weights_fall_back_to_even(self):
        assert allocate_quota(['a', 'b'], 3, {'a': 0, 'b': 0}) == {'a': 2, 'b': 1}

    def test_empty_keywords(self):
        assert allocate_quota([], 10) == {}

    def test_negative_limit(self):
        with pytest.raises(ValueError, match="non-negative"):
            allocate_quota(['a'], -1)

"""
Tests for theme detection over free text and positions.
"""

from ingestion.transforms.normalizers import Position
from sentiment.theme_classifier import detect_themes, themes_for_position
from sentiment.theme_rules import (
    THEME_TOKENS,
    HK_TECH,
    CHINA_HARD_TECH,
    GLOBAL_GROWTH_US,
    VIETNAM_SEA,
    HEALTHCARE
)


class TestDetectThemes:
    """Tests for detect_themes function."""

    def test_single_theme(self):
        assert detect_themes('S&P 500 SPY') == [GLOBAL_GROWTH_US]

    def test_case_insensitive_latin_tokens(self):
        """Latin tokens match regardless of case."""
        assert detect_themes('nvidia earnings') == [CHINA_HARD_TECH]
        assert detect_themes('Kweb inflows') == [HK_TECH]

    def test_multiple_themes_in_dictionary_order(self):
        """Hits are reported in dictionary order, not text order."""
        text = '越南 基金 与 恒生科技 ETF'

        assert detect_themes(text) == [HK_TECH, VIETNAM_SEA]

    def test_short_tokens_match_inside_words(self):
        """Substring matching lets 'AI' hit inside longer words."""
        assert CHINA_HARD_TECH in detect_themes('OpenAI model launch')

    def test_no_theme(self):
        assert detect_themes('天气 晴朗') == []
        assert detect_themes('') == []
        assert detect_themes(None) == []

    def test_every_theme_detectable_by_its_tokens(self):
        for theme, tokens in THEME_TOKENS.items():
            assert theme in detect_themes(tokens[0])


class TestThemesForPosition:
    """Tests for themes_for_position function."""

    def test_from_name_and_code(self):
        position = Position('CN_FUND', '006228', '中欧医疗创新')

        assert themes_for_position(position) == [HEALTHCARE]

    def test_explicit_theme_merged(self):
        """A known explicit theme is added in dictionary order."""
        position = Position('US_TICKER', 'SPY', 'S&P 500', theme=HK_TECH)

        assert themes_for_position(position) == [HK_TECH, GLOBAL_GROWTH_US]

    def test_unknown_explicit_theme_ignored(self):
        position = Position('US_TICKER', 'ZZZ', theme='Made Up')

        assert themes_for_position(position) == []

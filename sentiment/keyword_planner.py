"""
Keyword planner - turns a portfolio into a weighted news search plan.
Pure functions over positions and the static theme dictionaries.
"""

import logging
import math
import re
from typing import Dict, Any, List, Optional, Sequence

from analysis.calculations.concentration import (
    position_weights,
    aggregate_theme_weights,
    rank_themes
)
from ingestion.transforms.normalizers import Position
from sentiment.theme_classifier import themes_for_position
from sentiment.theme_rules import (
    THEME_TOKENS,
    MACRO_KEYWORDS,
    THEME_KEYWORDS,
    BROAD_KEYWORDS,
    INSTRUMENT_PATTERNS,
    FALLBACK_PLAN_THEME
)

# Set up logger
logger = logging.getLogger(__name__)


MAX_KEYWORDS = 28
MAX_KEYWORD_LENGTH = 20
MACRO_WEIGHT = 0.35
INSTRUMENT_WEIGHT = 0.75
BROAD_DISCOUNT = 0.25
FORCED_MIN_QUOTA_COUNT = 3

BUCKET_MACRO = 'macro'
BUCKET_THEME = 'theme'
BUCKET_INSTRUMENT = 'instrument'

_WHITESPACE = re.compile(r'\s+')


class KeywordPlanError(Exception):
    """Raised when no keyword plan can be built."""
    pass


def clean_keyword(keyword: str) -> str:
    """Collapse whitespace and truncate to the maximum keyword length."""
    return _WHITESPACE.sub(' ', keyword or '').strip()[:MAX_KEYWORD_LENGTH].strip()


def theme_contribution(theme_weight: float) -> float:
    """Keyword weight contributed by a theme of the given portfolio weight."""
    return 0.6 * theme_weight + 0.15


def detect_portfolio_themes(positions: Sequence[Position]) -> Dict[str, float]:
    """
    Aggregate portfolio weight per detected theme.

    Each position's weight is split evenly over its themes. The result is
    renormalized to sum to 1 and listed in dictionary order. A portfolio with
    no value weighs its positions equally. With no theme detected the
    fallback theme gets weight 1.

    Args:
        positions: Portfolio positions

    Returns:
        Dictionary mapping theme to weight
    """
    weights = position_weights(positions)
    if positions and sum(weights) <= 0:
        weights = [1.0 / len(positions)] * len(positions)
    detected = [themes_for_position(p) for p in positions]
    aggregated = aggregate_theme_weights(detected, weights)

    total = sum(w for w in aggregated.values() if w > 0)
    if total <= 0:
        logger.info(f"No theme detected, falling back to {FALLBACK_PLAN_THEME}")
        return {FALLBACK_PLAN_THEME: 1.0}

    return {
        theme: aggregated[theme] / total
        for theme in THEME_TOKENS
        if aggregated.get(theme, 0.0) > 0
    }


def plan_keywords(positions: Sequence[Position]) -> Dict[str, Any]:
    """
    Build a prioritized, deduplicated, weighted keyword plan.

    Contributions are additive per keyword:
    - macro keywords: 0.35 each
    - theme keywords: 0.6 * theme_weight + 0.15
    - instrument keywords (regex on position name/code): 0.75
    Broad keywords are discounted x0.25 at the point of contribution.
    Keywords are deduped case-insensitively after truncation to 20
    characters, capped at 28 by descending weight (trimmed weight is
    discarded) and renormalized to sum to 1.

    Args:
        positions: Portfolio positions

    Returns:
        Dictionary with themes, theme_weights, keywords, weights, buckets

    Raises:
        KeywordPlanError: If no positions are given
    """
    if not positions:
        raise KeywordPlanError("No positions provided for keyword planning")

    ranked_themes = rank_themes(detect_portfolio_themes(positions))

    book: Dict[str, Dict[str, Any]] = {}

    def contribute(keyword: str, amount: float, bucket: str) -> None:
        display = clean_keyword(keyword)
        if not display:
            return
        key = display.lower()
        if key in BROAD_KEYWORDS:
            amount *= BROAD_DISCOUNT
        entry = book.get(key)
        if entry is None:
            book[key] = {'keyword': display, 'weight': amount, 'bucket': bucket}
        else:
            entry['weight'] += amount

    for keyword in MACRO_KEYWORDS:
        contribute(keyword, MACRO_WEIGHT, BUCKET_MACRO)

    for theme, theme_weight in ranked_themes:
        for keyword in THEME_KEYWORDS.get(theme, ()):
            contribute(keyword, theme_contribution(theme_weight), BUCKET_THEME)

    for position in positions:
        for pattern, keyword in INSTRUMENT_PATTERNS:
            if pattern.search(position.label):
                contribute(keyword, INSTRUMENT_WEIGHT, BUCKET_INSTRUMENT)

    # Stable sort keeps contribution order among equal weights
    kept = sorted(book.values(), key=lambda e: e['weight'], reverse=True)[:MAX_KEYWORDS]
    if len(book) > len(kept):
        logger.info(f"Trimmed keyword plan from {len(book)} to {len(kept)} keywords")

    kept_total = sum(e['weight'] for e in kept)
    keywords = [e['keyword'] for e in kept]
    weights = {e['keyword']: e['weight'] / kept_total for e in kept}

    buckets: Dict[str, List[str]] = {
        BUCKET_MACRO: [],
        BUCKET_THEME: [],
        BUCKET_INSTRUMENT: []
    }
    for entry in kept:
        buckets[entry['bucket']].append(entry['keyword'])

    logger.info(
        f"Planned {len(keywords)} keywords across {len(ranked_themes)} themes "
        f"for {len(positions)} positions"
    )

    return {
        'themes': [theme for theme, _ in ranked_themes],
        'theme_weights': dict(ranked_themes),
        'keywords': keywords,
        'weights': weights,
        'buckets': buckets
    }


def allocate_quota(
    keywords: Sequence[str],
    limit: int,
    weights: Optional[Dict[str, float]] = None
) -> Dict[str, int]:
    """
    Split an overall result limit into per-keyword quotas.

    Weighted: quota = floor(limit * w / sum_w), the remainder is handed out
    one at a time in descending-weight order (cycling if needed), then the
    top three weighted keywords are lifted to at least 1. Each lifted unit is
    taken from the largest quota above 1, so quotas always sum to `limit`.

    Unweighted (or all weights zero): even split with the remainder going to
    the first keywords in input order.

    Args:
        keywords: Keywords to allocate to (duplicates are ignored)
        limit: Total number of items to allocate
        weights: Optional keyword -> weight map

    Returns:
        Dictionary mapping keyword to quota

    Raises:
        ValueError: If limit is negative
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    keywords = list(dict.fromkeys(keywords))
    n = len(keywords)
    if n == 0:
        return {}

    w = {k: max(0.0, float((weights or {}).get(k, 0.0))) for k in keywords}
    sum_w = sum(w.values())

    if not weights or sum_w <= 0:
        base, extra = divmod(limit, n)
        return {k: base + (1 if i < extra else 0) for i, k in enumerate(keywords)}

    # Descending weight, input order on ties
    order = sorted(keywords, key=lambda k: w[k], reverse=True)

    quotas = {k: int(math.floor(limit * w[k] / sum_w)) for k in keywords}
    remainder = limit - sum(quotas.values())

    i = 0
    while remainder > 0:
        quotas[order[i % n]] += 1
        remainder -= 1
        i += 1

    # Float rounding can overshoot by a unit; take it back from the tail
    for k in reversed(order):
        if remainder >= 0:
            break
        if quotas[k] > 0:
            quotas[k] -= 1
            remainder += 1

    for k in order[:min(FORCED_MIN_QUOTA_COUNT, limit)]:
        if quotas[k] > 0:
            continue
        donors = [d for d in reversed(order) if quotas[d] > 1]
        if not donors:
            break
        donor = max(donors, key=lambda d: quotas[d])
        quotas[donor] -= 1
        quotas[k] = 1

    return quotas

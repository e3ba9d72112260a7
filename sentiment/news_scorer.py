"""
News scorer - relevance and sentiment tagging for keyword search results.
Pure functions; items arrive already fetched and parsed.
"""

import logging
from typing import Dict, Any, List, Optional, Sequence
from rapidfuzz import fuzz

from sentiment.theme_classifier import detect_themes
from sentiment.theme_rules import (
    FINANCE_SIGNAL_PATTERN,
    TABLOID_PATTERN,
    BULLISH_WORDS,
    BEARISH_WORDS
)

# Set up logger
logger = logging.getLogger(__name__)


DEFAULT_MIN_SCORE = 2

SENTIMENT_BULLISH = 'bullish'
SENTIMENT_BEARISH = 'bearish'
SENTIMENT_NEUTRAL = 'neutral'


def _item_text(item: Dict[str, Any]) -> str:
    return f"{item.get('title') or ''} {item.get('description') or ''}".strip()


def classify_sentiment(text: str) -> str:
    """
    Classify text sentiment from fixed bullish/bearish word lists.

    Each listed word present in the text counts once.

    Returns:
        'bullish' if bullish words outnumber bearish by at least one,
        'bearish' for the reverse, otherwise 'neutral'
    """
    folded = (text or '').lower()
    bullish = sum(1 for word in BULLISH_WORDS if word in folded)
    bearish = sum(1 for word in BEARISH_WORDS if word in folded)

    if bullish >= bearish + 1:
        return SENTIMENT_BULLISH
    if bearish >= bullish + 1:
        return SENTIMENT_BEARISH
    return SENTIMENT_NEUTRAL


def score_news_item(item: Dict[str, Any], keyword: str) -> Dict[str, Any]:
    """
    Score and tag one news item against the keyword it was fetched for.

    Score:
    - +2 if the text contains the keyword (case-insensitive)
    - + number of distinct themes mentioned, at most 2
    - +1 if the text carries a finance signal
    - -1 if the text looks like tabloid/gossip content

    Args:
        item: Raw item with title, link, pub_date, description
        keyword: Search keyword the item was fetched for

    Returns:
        NewsItem dictionary with keyword, score, themes and sentiment
    """
    text = _item_text(item)
    folded = text.lower()
    themes = detect_themes(text)

    score = 0
    if keyword and keyword.lower() in folded:
        score += 2
    score += min(2, len(themes))
    if FINANCE_SIGNAL_PATTERN.search(text):
        score += 1
    if TABLOID_PATTERN.search(text):
        score -= 1

    return {
        'title': item.get('title') or '',
        'link': item.get('link') or '',
        'pub_date': item.get('pub_date'),
        'description': item.get('description') or '',
        'keyword': keyword,
        'score': score,
        'themes': themes,
        'sentiment': classify_sentiment(text)
    }


def score_and_filter_news(
    items: Sequence[Dict[str, Any]],
    keyword: str,
    min_score: int = DEFAULT_MIN_SCORE,
    quota: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Score a keyword's items, drop weak ones and rank the rest.

    Args:
        items: Raw items fetched for the keyword
        keyword: Search keyword
        min_score: Items scoring below this are discarded
        quota: Keep at most this many items (all when None)

    Returns:
        NewsItem dictionaries, highest score first (stable on ties)
    """
    scored = [score_news_item(item, keyword) for item in items]
    kept = [s for s in scored if s['score'] >= min_score]
    kept = sorted(kept, key=lambda s: s['score'], reverse=True)

    if quota is not None:
        kept = kept[:max(0, quota)]

    logger.debug(f"Keyword '{keyword}': kept {len(kept)} of {len(scored)} items")
    return kept


def merge_news(
    per_keyword: Sequence[Sequence[Dict[str, Any]]],
    limit: int,
    title_similarity: Optional[float] = None
) -> List[Dict[str, Any]]:
    """
    Merge per-keyword results into one ranked list.

    Lists are concatenated in keyword order, sorted by descending score
    (stable), and duplicate links are dropped keeping the first occurrence.
    With a title similarity threshold, near-duplicate titles are collapsed
    before the limit is applied.

    Args:
        per_keyword: Scored item lists in keyword order
        limit: Maximum number of items returned
        title_similarity: Collapse titles at or above this similarity (0.0-1.0)

    Returns:
        Ranked, deduplicated NewsItem dictionaries
    """
    merged = [item for items in per_keyword for item in items]
    merged = sorted(merged, key=lambda s: s['score'], reverse=True)

    seen_links = set()
    result = []
    for item in merged:
        link = item.get('link')
        if link in seen_links:
            continue
        seen_links.add(link)
        result.append(item)

    if title_similarity is not None:
        result = collapse_near_duplicates(result, threshold=title_similarity)

    return result[:max(0, limit)]


def collapse_near_duplicates(
    items: Sequence[Dict[str, Any]],
    threshold: float = 0.92
) -> List[Dict[str, Any]]:
    """
    Drop items whose title nearly repeats an earlier kept item.

    The same story syndicated by several outlets arrives under different
    links; this keeps the first (highest ranked) copy.

    Args:
        items: Ranked NewsItem dictionaries
        threshold: Title similarity (0.0-1.0) at or above which items collapse

    Returns:
        Items with near-duplicates removed, order preserved
    """
    kept: List[Dict[str, Any]] = []
    for item in items:
        title = item.get('title') or ''
        duplicate = any(
            fuzz.ratio(title, other.get('title') or '') / 100.0 >= threshold
            for other in kept
        )
        if duplicate:
            logger.debug(f"Collapsed near-duplicate title: {title}")
            continue
        kept.append(item)
    return kept

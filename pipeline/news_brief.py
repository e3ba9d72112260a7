"""
News brief - keyword-planned news search for a portfolio.
Composes: Keyword plan -> Quotas -> RSS fetch (per keyword, concurrent)
-> Score/filter -> Merge (with optional near-duplicate collapse).
"""

import os
import logging
from typing import Dict, Any, Callable, List, Optional, Sequence
from dotenv import load_dotenv

from ingestion.transforms.normalizers import Position
from sentiment.keyword_planner import plan_keywords, allocate_quota
from sentiment.news_scorer import (
    score_and_filter_news,
    merge_news
)
from sentiment.rss_ingestion import fetch_keyword_news
from pipeline.workers import run_isolated, PipelineError

# Load environment variables
load_dotenv()

# Set up logger
logger = logging.getLogger(__name__)


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


def run_news_brief(
    positions: Sequence[Position],
    total_limit: Optional[int] = None,
    min_score: Optional[int] = None,
    fetch: Callable[[str], List[Dict[str, Any]]] = fetch_keyword_news,
    max_workers: Optional[int] = None,
    title_similarity: Optional[float] = None
) -> Dict[str, Any]:
    """
    Build a news brief for the portfolio.

    Keywords whose fetch fails are reported in diagnostics and contribute
    no items; the remaining keywords are unaffected.

    Args:
        positions: Portfolio positions
        total_limit: Maximum items in the brief (NEWS_TOTAL_LIMIT, default 30)
        min_score: Minimum relevance score (NEWS_MIN_SCORE, default 2)
        fetch: Raw item fetcher for one keyword
        max_workers: Thread pool size
        title_similarity: Collapse titles at or above this similarity
            (NEWS_TITLE_SIMILARITY; off when unset)

    Returns:
        Dictionary with plan, quotas, items and diagnostics [{keyword, error}]

    Raises:
        PipelineError: If no positions are given or the plan has no keywords
    """
    if not positions:
        raise PipelineError("positions required")

    if total_limit is None:
        total_limit = int(os.getenv('NEWS_TOTAL_LIMIT', '30'))
    if min_score is None:
        min_score = int(os.getenv('NEWS_MIN_SCORE', '2'))
    if title_similarity is None:
        title_similarity = _env_float('NEWS_TITLE_SIMILARITY')

    plan = plan_keywords(positions)
    keywords = plan['keywords']
    if not keywords:
        raise PipelineError("keyword plan is empty")

    quotas = allocate_quota(keywords, total_limit, plan['weights'])
    active = [k for k in keywords if quotas.get(k, 0) > 0]

    per_keyword = []
    diagnostics = []
    for keyword, raw_items, error in run_isolated(fetch, active, max_workers):
        if error is not None:
            diagnostics.append({'keyword': keyword, 'error': str(error)})
            continue
        per_keyword.append(
            score_and_filter_news(raw_items, keyword, min_score=min_score, quota=quotas[keyword])
        )

    items = merge_news(per_keyword, total_limit, title_similarity=title_similarity)

    logger.info(
        f"News brief: {len(items)} items from {len(active)} keywords "
        f"({len(diagnostics)} failed)"
    )

    return {
        'plan': plan,
        'quotas': quotas,
        'items': items,
        'diagnostics': diagnostics
    }

"""
RSS news ingestion for keyword searches.
Fetches one search feed per keyword and returns raw text items.
"""

import os
import logging
from datetime import datetime
from typing import Dict, List, Any, Optional
from urllib.parse import quote_plus
import feedparser
import requests
from bs4 import BeautifulSoup
from dateutil import parser as date_parser
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Set up logger
logger = logging.getLogger(__name__)


DEFAULT_RSS_URL_TEMPLATE = (
    'https://news.google.com/rss/search?q={query}&hl=zh-CN&gl=CN&ceid=CN:zh-Hans'
)

TRACKING_PARAMS = {
    'utm_source', 'utm_medium', 'utm_campaign', 'utm_content', 'utm_term',
    'ref', 'referrer', 'fbclid', 'gclid'
}


class RSSIngestionError(Exception):
    """Raised when RSS ingestion fails."""
    pass


def build_search_url(keyword: str) -> str:
    """
    Build the search feed URL for a keyword.

    The template comes from NEWS_RSS_URL_TEMPLATE and must contain '{query}'.
    """
    template = os.getenv('NEWS_RSS_URL_TEMPLATE', DEFAULT_RSS_URL_TEMPLATE)
    return template.format(query=quote_plus(keyword))


def normalize_link(url: str) -> str:
    """
    Normalize a link for deduplication.

    Strips whitespace, the fragment and tracking parameters; the scheme and
    host are lowercased, the path is left alone.

    Args:
        url: Raw link

    Returns:
        Normalized link
    """
    normalized = (url or '').strip()

    if '#' in normalized:
        normalized = normalized.split('#')[0]

    if '://' in normalized:
        scheme, rest = normalized.split('://', 1)
        host, sep, tail = rest.partition('/')
        normalized = f"{scheme.lower()}://{host.lower()}{sep}{tail}"

    if '?' in normalized:
        base_url, params = normalized.split('?', 1)
        kept = [
            param for param in params.split('&')
            if param and param.split('=', 1)[0].lower() not in TRACKING_PARAMS
        ]
        normalized = base_url + ('?' + '&'.join(kept) if kept else '')

    return normalized


def clean_description(html: Optional[str]) -> str:
    """Strip markup and collapse whitespace in a feed summary."""
    if not html:
        return ''
    text = BeautifulSoup(html, 'html.parser').get_text(' ', strip=True)
    return ' '.join(text.split())


def process_rss_entry(entry: Any) -> Optional[Dict[str, Any]]:
    """
    Process an individual feed entry into a raw text item.

    Args:
        entry: feedparser entry object

    Returns:
        Dictionary with title, link, pub_date (ISO string or None) and
        description, or None if the entry has no title or link
    """
    title = (getattr(entry, 'title', '') or '').strip()
    link = (getattr(entry, 'link', '') or '').strip()
    if not title or not link:
        return None

    pub_date = None
    if getattr(entry, 'published_parsed', None):
        pub_date = datetime(*entry.published_parsed[:6]).isoformat()
    elif getattr(entry, 'published', None):
        try:
            pub_date = date_parser.parse(entry.published).isoformat()
        except (ValueError, OverflowError):
            logger.debug(f"Unparseable publication date: {entry.published}")

    summary = getattr(entry, 'summary', None) or getattr(entry, 'description', None)

    return {
        'title': title,
        'link': normalize_link(link),
        'pub_date': pub_date,
        'description': clean_description(summary)
    }


def fetch_keyword_news(keyword: str) -> List[Dict[str, Any]]:
    """
    Fetch raw news items for one search keyword.

    Args:
        keyword: Search keyword

    Returns:
        List of raw items {title, link, pub_date, description}

    Raises:
        RSSIngestionError: If the fetch fails or the feed cannot be parsed
    """
    if not keyword or not keyword.strip():
        raise RSSIngestionError("Keyword must be non-empty")

    url = build_search_url(keyword.strip())
    timeout = int(os.getenv('REQUESTS_TIMEOUT_S', '12'))
    headers = {
        'User-Agent': os.getenv('NEWS_USER_AGENT', 'portfolio-signals/1.0'),
        'Accept': 'application/rss+xml, application/xml, text/xml'
    }

    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise RSSIngestionError(f"RSS fetch failed for '{keyword}': {e}") from e

    if response.status_code != 200:
        raise RSSIngestionError(
            f"RSS fetch failed for '{keyword}': HTTP {response.status_code}"
        )

    feed = feedparser.parse(response.content)
    if getattr(feed, 'bozo', False) and not feed.entries:
        raise RSSIngestionError(
            f"RSS parse failed for '{keyword}': {getattr(feed, 'bozo_exception', 'malformed feed')}"
        )

    items = []
    for entry in feed.entries:
        item = process_rss_entry(entry)
        if item:
            items.append(item)

    logger.info(f"Fetched {len(items)} items for keyword '{keyword}'")
    return items

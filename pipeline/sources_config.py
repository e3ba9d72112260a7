"""
Sources configuration - optional YAML override of the radar universe and
news brief settings.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional
import yaml
from dotenv import load_dotenv

from analysis.radar import RadarProxy

# Load environment variables
load_dotenv()

# Set up logger
logger = logging.getLogger(__name__)


NEWS_SETTINGS = {
    'total_limit': int,
    'min_score': int,
    'title_similarity': float
}


class SourcesConfigError(Exception):
    """Raised when the sources configuration cannot be loaded."""
    pass


def load_sources_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the sources configuration from a YAML file.

    Expected layout:

        radar:
          - {symbol: XLK, label: Technology (US)}
        news:
          total_limit: 30
          min_score: 2
          title_similarity: 0.92

    Args:
        config_path: Path to the YAML file (defaults to SIGNALS_SOURCES_CONFIG,
            then ./config/sources.yml)

    Returns:
        Dictionary with radar_universe (tuple of RadarProxy) and news settings

    Raises:
        SourcesConfigError: If the file is missing or malformed
    """
    if config_path is None:
        config_path = os.getenv('SIGNALS_SOURCES_CONFIG', './config/sources.yml')

    config_file = Path(config_path)
    if not config_file.exists():
        raise SourcesConfigError(f"Sources config file not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SourcesConfigError(f"Failed to parse sources config: {e}") from e

    if not isinstance(config, dict):
        raise SourcesConfigError("Sources config must be a mapping")

    radar = config.get('radar')
    if not isinstance(radar, list) or not radar:
        raise SourcesConfigError("Sources config missing 'radar' list")

    universe = []
    seen = set()
    for i, entry in enumerate(radar):
        if not isinstance(entry, dict):
            raise SourcesConfigError(f"Radar entry {i} must be a mapping")
        symbol = str(entry.get('symbol') or '').strip().upper()
        if not symbol:
            raise SourcesConfigError(f"Radar entry {i} missing 'symbol'")
        if symbol in seen:
            raise SourcesConfigError(f"Duplicate radar symbol: {symbol}")
        seen.add(symbol)
        label = str(entry.get('label') or symbol).strip()
        universe.append(RadarProxy(symbol, label))

    news_raw = config.get('news') or {}
    if not isinstance(news_raw, dict):
        raise SourcesConfigError("Sources config 'news' must be a mapping")

    news = {}
    for key, cast in NEWS_SETTINGS.items():
        if news_raw.get(key) is None:
            continue
        try:
            news[key] = cast(news_raw[key])
        except (TypeError, ValueError) as e:
            raise SourcesConfigError(f"Invalid news setting '{key}': {news_raw[key]}") from e

    logger.info(f"Loaded {len(universe)} radar proxies from {config_path}")
    return {'radar_universe': tuple(universe), 'news': news}

#!/usr/bin/env python3
"""
Main CLI for the portfolio signals toolkit.
Usage: python cli.py {radar,tech,risk,keywords,news} [options]
"""

import os
import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv

from analysis.radar import DEFAULT_TOP_N
from analysis.risk_grader import grade_risk
from ingestion.transforms.normalizers import normalize_positions, Position
from pipeline.news_brief import run_news_brief
from pipeline.radar_scan import run_radar_scan
from pipeline.sources_config import load_sources_config
from pipeline.tech_batch import run_tech_batch
from sentiment.keyword_planner import plan_keywords, allocate_quota

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class PortfolioFileError(Exception):
    """Raised when a portfolio file cannot be read."""
    pass


def load_portfolio(path: str) -> List[Position]:
    """
    Load positions from a JSON file.

    The file holds either a list of positions or {"positions": [...]}.
    """
    portfolio_file = Path(path)
    if not portfolio_file.exists():
        raise PortfolioFileError(f"Portfolio file not found: {path}")

    try:
        with open(portfolio_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise PortfolioFileError(f"Portfolio file is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get('positions')
    if not isinstance(data, list):
        raise PortfolioFileError("Portfolio file must hold a list of positions")

    return normalize_positions(data)


def _emit(result: Any) -> None:
    print(json.dumps(result, ensure_ascii=False, indent=2, default=str))


def _cmd_radar(args: argparse.Namespace) -> Dict[str, Any]:
    universe = None
    if args.config:
        universe = load_sources_config(args.config)['radar_universe']
    return run_radar_scan(top_n=args.limit, universe=universe)


def _cmd_tech(args: argparse.Namespace) -> List[Dict[str, Any]]:
    return run_tech_batch(load_portfolio(args.portfolio))


def _cmd_risk(args: argparse.Namespace) -> Dict[str, Any]:
    return grade_risk(load_portfolio(args.portfolio))


def _cmd_keywords(args: argparse.Namespace) -> Dict[str, Any]:
    plan = plan_keywords(load_portfolio(args.portfolio))
    limit = args.limit if args.limit is not None else int(os.getenv('NEWS_TOTAL_LIMIT', '30'))
    return {**plan, 'quotas': allocate_quota(plan['keywords'], limit, plan['weights'])}


def _cmd_news(args: argparse.Namespace) -> Dict[str, Any]:
    settings = {}
    if args.config:
        settings = load_sources_config(args.config)['news']
    if args.limit is not None:
        settings['total_limit'] = args.limit
    return run_news_brief(load_portfolio(args.portfolio), **settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Portfolio signals: sector radar, indicators, risk and news',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py radar --limit 5
  python cli.py tech portfolio.json
  python cli.py risk portfolio.json
  python cli.py news portfolio.json --limit 20
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    radar = subparsers.add_parser('radar', help='Rank sector proxy ETFs by momentum')
    radar.add_argument('--limit', type=int, default=DEFAULT_TOP_N,
                       help=f'Number of proxies to show, 1-8 (default: {DEFAULT_TOP_N})')
    radar.add_argument('--config', help='Sources YAML overriding the radar universe')
    radar.set_defaults(handler=_cmd_radar)

    tech = subparsers.add_parser('tech', help='Indicator snapshot per position')
    tech.add_argument('portfolio', help='Portfolio JSON file')
    tech.set_defaults(handler=_cmd_tech)

    risk = subparsers.add_parser('risk', help='Grade portfolio concentration risk')
    risk.add_argument('portfolio', help='Portfolio JSON file')
    risk.set_defaults(handler=_cmd_risk)

    keywords = subparsers.add_parser('keywords', help='Show the news keyword plan')
    keywords.add_argument('portfolio', help='Portfolio JSON file')
    keywords.add_argument('--limit', type=int,
                          help='Total news items to allocate (default: NEWS_TOTAL_LIMIT)')
    keywords.set_defaults(handler=_cmd_keywords)

    news = subparsers.add_parser('news', help='Build a portfolio news brief')
    news.add_argument('portfolio', help='Portfolio JSON file')
    news.add_argument('--limit', type=int,
                      help='Maximum items in the brief (default: NEWS_TOTAL_LIMIT)')
    news.add_argument('--config', help='Sources YAML with news settings')
    news.set_defaults(handler=_cmd_news)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'WARNING').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        result = args.handler(args)
    except Exception as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    _emit(result)
    return 0


if __name__ == '__main__':
    sys.exit(main())

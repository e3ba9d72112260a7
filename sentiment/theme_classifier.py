"""
Theme classifier - maps free text to market theme tags.
Case-folded substring search over per-theme token lists; no tokenizer.
"""

from typing import List, Optional

from ingestion.transforms.normalizers import Position
from sentiment.theme_rules import THEME_TOKENS, THEME_TOKENS_FOLDED


def detect_themes(text: Optional[str]) -> List[str]:
    """
    Detect themes mentioned in text.

    A theme is hit when any one of its tokens occurs as a substring of the
    lowercased text. There is no scoring within a theme.

    Args:
        text: Free text in any script (may be None)

    Returns:
        Matched theme names in dictionary order
    """
    folded = (text or '').lower()
    if not folded:
        return []

    hits = []
    for theme, tokens in THEME_TOKENS_FOLDED.items():
        if any(token in folded for token in tokens):
            hits.append(theme)
    return hits


def themes_for_position(position: Position) -> List[str]:
    """
    Detect themes for a position from its name and code.

    An explicit position theme naming a known theme is merged in; the result
    stays in dictionary order.
    """
    hits = set(detect_themes(f"{position.name} {position.code}"))
    if position.theme in THEME_TOKENS:
        hits.add(position.theme)
    return [theme for theme in THEME_TOKENS if theme in hits]

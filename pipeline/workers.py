"""
Thread pool helper for per-item external calls.
Each task has its own error channel; one failure never aborts the batch.
"""

import os
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence, Tuple
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Set up logger
logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Raised when a pipeline request has nothing usable to work on."""
    pass


def default_max_workers() -> int:
    """Worker count from SIGNALS_MAX_WORKERS (default 6)."""
    return max(1, int(os.getenv('SIGNALS_MAX_WORKERS', '6')))


def run_isolated(
    func: Callable[[Any], Any],
    items: Sequence[Any],
    max_workers: Optional[int] = None
) -> List[Tuple[Any, Any, Optional[Exception]]]:
    """
    Run func over items on a thread pool with per-task error isolation.

    Args:
        func: Callable applied to each item
        items: Inputs, one task each
        max_workers: Pool size (defaults to SIGNALS_MAX_WORKERS)

    Returns:
        List of (item, result, error) in submission order; result is None
        when error is set
    """
    if not items:
        return []

    workers = min(max_workers or default_max_workers(), len(items))
    outcomes = []

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # Futures are read in submission order; completion order does not matter
        futures = [executor.submit(func, item) for item in items]
        for item, future in zip(items, futures):
            try:
                outcomes.append((item, future.result(), None))
            except Exception as exc:
                logger.warning(f"Task failed for {item}: {exc}")
                outcomes.append((item, None, exc))

    return outcomes

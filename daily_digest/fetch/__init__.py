"""
Feed fetching.

This package handles HTTP retrieval with timeouts and the bounded
worker pool that schedules one fetch task per source.
"""

from .fetcher import FeedResult, build_client, fetch_source, fetch_text
from .pool import fetch_all, run_pool

__all__ = [
    "FeedResult",
    "build_client",
    "fetch_source",
    "fetch_text",
    "fetch_all",
    "run_pool",
]

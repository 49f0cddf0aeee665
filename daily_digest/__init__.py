"""
Daily Digest - concurrent RSS/Atom feed ingestion.

This package fetches many syndication feeds concurrently, extracts the
articles published within a lookback window, and emits them as a single
JSON array sorted newest first, ready for downstream summarization.

Main entry point is the CLI via the `daily-digest` command.

Example:
    $ daily-digest --sources sources.json --hours 24 > articles.json
"""

__all__ = ["__version__", "Article", "Source", "RunStats", "parse_feed", "run_digest"]
__version__ = "0.1.0"

from .core.types import Article, RunStats, Source
from .parse.feed import parse_feed
from .runner import run_digest

"""
Core domain models.

This package contains data types, the error taxonomy and the final
aggregation step, independent of fetching and parsing.
"""

from .aggregate import sort_articles
from .errors import (
    ConfigError,
    DigestError,
    FetchError,
    FetchTimeout,
    HttpStatusError,
    NetworkError,
    SourceListError,
)
from .types import Article, RunContext, RunStats, Source

__all__ = [
    "Article",
    "Source",
    "RunStats",
    "RunContext",
    "sort_articles",
    "DigestError",
    "ConfigError",
    "SourceListError",
    "FetchError",
    "FetchTimeout",
    "HttpStatusError",
    "NetworkError",
]

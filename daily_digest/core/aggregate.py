from __future__ import annotations

from typing import Iterable

from .types import Article


def sort_articles(articles: Iterable[Article]) -> list[Article]:
    """Return articles sorted newest first.

    Articles with equal timestamps have no defined relative order: the sort
    is stable, so they keep the order in which their fetch tasks completed,
    which depends on network latency.
    """
    return sorted(articles, key=lambda article: article.timestamp, reverse=True)

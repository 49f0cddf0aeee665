"""
Core data types for the Daily Digest.

This module defines the fundamental data structures used throughout the run:
- Source: One feed to fetch, as supplied by the source list
- Article: A normalized entry that passed the time window
- RunStats: Per-run success/failure counters
- RunContext: Immutable per-run parameters shared by every fetch task
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

MS_PER_HOUR = 3_600_000


@dataclass(frozen=True)
class Source:
    """A feed to fetch.

    Attributes:
        name: Display name of the feed (e.g., "Hacker News")
        feed_url: URL of the Atom/RSS document
        site_url: URL of the human-facing site, copied onto each Article
    """
    name: str
    feed_url: str
    site_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Source":
        """Build a Source from an OPML-style record.

        Accepts the `{name, xmlUrl, htmlUrl}` keys used by OPML exports as
        well as `feed_url`/`site_url`.

        Raises:
            KeyError: If the name or feed URL is missing or empty
        """
        name = str(data.get("name") or "").strip()
        feed_url = str(data.get("xmlUrl") or data.get("feed_url") or "").strip()
        site_url = str(data.get("htmlUrl") or data.get("site_url") or "").strip()
        if not name:
            raise KeyError("name")
        if not feed_url:
            raise KeyError("xmlUrl")
        return cls(name=name, feed_url=feed_url, site_url=site_url)


@dataclass(frozen=True)
class Article:
    """A normalized feed entry.

    Title and link are required; constructing an Article without either
    raises ValueError.

    Attributes:
        title: Plain-text headline
        link: URL of the article
        summary: Plain-text summary, at most 500 characters
        timestamp: Publication time in epoch milliseconds
        iso_date: Publication time as an ISO 8601 UTC string
        source_name: Name of the feed the article came from
        source_url: Site URL of the feed the article came from
    """
    title: str
    link: str
    summary: str
    timestamp: int
    iso_date: str
    source_name: str
    source_url: str

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Article title must not be empty")
        if not self.link:
            raise ValueError("Article link must not be empty")

    def to_dict(self) -> dict[str, Any]:
        """Render the article with its wire-format keys."""
        return {
            "title": self.title,
            "link": self.link,
            "summary": self.summary,
            "timestamp": self.timestamp,
            "isoDate": self.iso_date,
            "sourceName": self.source_name,
            "sourceUrl": self.source_url,
        }


@dataclass
class RunStats:
    """Counters updated as each fetch task completes.

    Attributes:
        total: Number of sources scheduled
        ok: Sources fetched and parsed (possibly with zero articles)
        failed: Sources that timed out, returned a bad status or failed to connect
    """
    total: int = 0
    ok: int = 0
    failed: int = 0

    @property
    def completed(self) -> int:
        return self.ok + self.failed


@dataclass(frozen=True)
class RunContext:
    """Parameters fixed at run start and read by every fetch task.

    Attributes:
        cutoff_ms: Earliest admissible article timestamp (epoch ms)
        concurrency: Maximum number of requests in flight
        timeout_ms: Hard wall-clock limit for a single request
        user_agent: User-Agent header sent with every request
    """
    cutoff_ms: int
    concurrency: int = 15
    timeout_ms: int = 15000
    user_agent: str = "DailyDigest/0.1 (+feed fetcher)"

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be > 0, got {self.timeout_ms}")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def build(
        cls,
        hours: float,
        now: datetime | None = None,
        **kwargs: Any,
    ) -> "RunContext":
        """Compute the cutoff from a lookback window ending at `now`."""
        now = now or datetime.now(timezone.utc)
        now_ms = int(now.timestamp() * 1000)
        return cls(cutoff_ms=now_ms - int(hours * MS_PER_HOUR), **kwargs)

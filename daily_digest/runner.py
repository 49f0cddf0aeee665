"""
Run orchestration for the Daily Digest.

This module coordinates one ingestion run:
1. Compute the cutoff and build the immutable RunContext
2. Fetch and parse every source through the bounded pool
3. Accumulate articles and RunStats as tasks complete
4. Sort the collected articles newest first

Per-source failures are logged and counted; they never abort the run.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
import logging
from typing import Sequence

import httpx
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from .config import AppConfig
from .core.aggregate import sort_articles
from .core.types import Article, RunContext, RunStats, Source
from .fetch.fetcher import FeedResult, build_client
from .fetch.pool import fetch_all
from .logging_utils import LOGGER_NAME, STDERR_CONSOLE, log_event


@dataclass
class DigestResult:
    """Output of one run.

    Attributes:
        articles: Articles from every source, sorted newest first
        stats: Source success/failure counters
        cutoff_ms: The cutoff used for the time window
        failures: Results of the sources that failed, in completion order
    """
    articles: list[Article]
    stats: RunStats
    cutoff_ms: int
    failures: list[FeedResult] = field(default_factory=list)


def build_context(cfg: AppConfig, now: datetime | None = None) -> RunContext:
    return RunContext.build(
        cfg.window.hours,
        now=now,
        concurrency=cfg.fetch.concurrency,
        timeout_ms=cfg.fetch.timeout_ms,
        user_agent=cfg.fetch.user_agent,
    )


def run_digest(
    sources: Sequence[Source],
    cfg: AppConfig,
    now: datetime | None = None,
    show_progress: bool = False,
    console: Console | None = None,
    client: httpx.AsyncClient | None = None,
) -> DigestResult:
    """Fetch all sources and return the merged, sorted articles.

    Args:
        sources: Feeds to fetch
        cfg: Application configuration
        now: End of the lookback window (defaults to the current time)
        show_progress: Whether to display a progress bar on stderr
        console: Rich console for the progress bar (the shared stderr console if None)
        client: Optional pre-built HTTP client; it is not closed here

    Returns:
        DigestResult with sorted articles and run statistics
    """
    ctx = build_context(cfg, now)
    logger = logging.getLogger(LOGGER_NAME)

    if not show_progress:
        return asyncio.run(collect_articles(sources, ctx, cfg, logger, client=client))

    console = console or STDERR_CONSOLE
    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    )
    with progress:
        fetch_task = progress.add_task("Fetch feeds", total=len(sources))
        return asyncio.run(
            collect_articles(
                sources, ctx, cfg, logger, client=client, progress=progress, fetch_task=fetch_task
            )
        )


async def collect_articles(
    sources: Sequence[Source],
    ctx: RunContext,
    cfg: AppConfig,
    logger: logging.Logger,
    client: httpx.AsyncClient | None = None,
    progress: Progress | None = None,
    fetch_task: int | None = None,
) -> DigestResult:
    """Async implementation of a run.

    The completion hook runs between awaits on the event loop, so the
    shared article list and RunStats are mutated without locking.
    """
    stats = RunStats(total=len(sources))
    collected: list[Article] = []
    failures: list[FeedResult] = []

    log_event(
        logger,
        f"Fetching {len(sources)} feeds ({_format_hours(cfg.window.hours)}h window, "
        f"{ctx.concurrency} concurrent)...",
        event="run_start",
        total=len(sources),
        cutoff_ms=ctx.cutoff_ms,
        concurrency=ctx.concurrency,
    )

    def on_result(result: FeedResult) -> None:
        if result.ok:
            stats.ok += 1
            collected.extend(result.articles)
        else:
            stats.failed += 1
            failures.append(result)
            log_event(
                logger,
                f"✗ {result.source.name}: {result.error}",
                level=logging.WARNING,
                event="fetch_failed",
                source=result.source.name,
                url=result.source.feed_url,
                error_kind=result.error.kind,
                error=str(result.error),
            )

        every = cfg.output.progress_every
        if every > 0 and stats.completed % every == 0:
            log_event(
                logger,
                f"Progress: {stats.completed}/{stats.total} ({stats.ok} ok, {stats.failed} failed)",
                event="progress",
                completed=stats.completed,
                ok=stats.ok,
                failed=stats.failed,
            )
        if progress is not None and fetch_task is not None:
            progress.advance(fetch_task, 1)

    if client is None:
        async with build_client(
            ctx, trust_env=cfg.fetch.trust_env, follow_redirects=cfg.fetch.follow_redirects
        ) as own_client:
            await fetch_all(sources, ctx, own_client, on_result)
    else:
        await fetch_all(sources, ctx, client, on_result)

    articles = sort_articles(collected)
    log_event(
        logger,
        f"Done: {len(articles)} articles from {stats.ok} feeds ({stats.failed} failed)",
        event="run_complete",
        articles=len(articles),
        ok=stats.ok,
        failed=stats.failed,
    )
    return DigestResult(articles=articles, stats=stats, cutoff_ms=ctx.cutoff_ms, failures=failures)


def _format_hours(hours: float) -> str:
    return f"{hours:g}"

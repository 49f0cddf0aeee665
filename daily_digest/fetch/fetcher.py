"""
Feed fetching with a hard per-request timeout.

Each fetch task retrieves one source with httpx and hands the body to the
feed parser. Transport failures, timeouts and non-2xx statuses are
classified into FetchError subclasses and returned in the FeedResult;
nothing raised by the network layer escapes `fetch_source`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import asyncio
import time

import httpx

from ..core.errors import FetchError, FetchTimeout, HttpStatusError, NetworkError
from ..core.types import Article, RunContext, Source
from ..parse.feed import parse_feed


@dataclass
class FeedResult:
    """Result of fetching and parsing one source.

    Either articles will be populated (success, possibly empty) or error
    will be set (failure), but never both.

    Attributes:
        source: The source that was fetched
        articles: Articles inside the time window
        error: Classified failure, or None on success
        elapsed_ms: Wall-clock time spent on the task
    """
    source: Source
    articles: list[Article] = field(default_factory=list)
    error: FetchError | None = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


def build_client(
    ctx: RunContext,
    trust_env: bool = True,
    follow_redirects: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared client used by every fetch task in a run."""
    limits = httpx.Limits(max_connections=ctx.concurrency, max_keepalive_connections=ctx.concurrency)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(ctx.timeout_seconds),
        headers={"User-Agent": ctx.user_agent},
        follow_redirects=follow_redirects,
        trust_env=trust_env,
        limits=limits,
        transport=transport,
    )


async def fetch_text(client: httpx.AsyncClient, url: str, timeout_ms: int) -> str:
    """GET a URL and return its body.

    The whole request, body included, must finish within timeout_ms;
    otherwise it is cancelled.

    Raises:
        FetchTimeout: The request did not finish in time
        HttpStatusError: The final response status was outside 2xx
        NetworkError: The request failed at the transport level
    """
    try:
        resp = await asyncio.wait_for(client.get(url), timeout=timeout_ms / 1000)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise FetchTimeout(timeout_ms) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise NetworkError(exc) from exc

    if not resp.is_success:
        raise HttpStatusError(resp.status_code)
    return resp.text


async def fetch_source(client: httpx.AsyncClient, source: Source, ctx: RunContext) -> FeedResult:
    """Fetch one source and parse it into articles.

    Args:
        client: Shared HTTP client
        source: The feed to fetch
        ctx: Run parameters (cutoff and timeout)

    Returns:
        FeedResult with articles on success or a classified error on failure
    """
    start = time.monotonic()
    try:
        xml = await fetch_text(client, source.feed_url, ctx.timeout_ms)
    except FetchError as exc:
        return FeedResult(source=source, error=exc, elapsed_ms=_elapsed_ms(start))

    articles = parse_feed(xml, source, ctx.cutoff_ms)
    return FeedResult(source=source, articles=articles, elapsed_ms=_elapsed_ms(start))


def _elapsed_ms(start: float) -> float:
    return (time.monotonic() - start) * 1000

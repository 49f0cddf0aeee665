"""End-to-end tests for a run over a faked network."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
import time

import httpx

from daily_digest import runner
from daily_digest.config import AppConfig, LoggingConfig
from daily_digest.core.types import Source
from daily_digest.logging_utils import LOGGER_NAME, STDERR_CONSOLE, setup_logging
from daily_digest.runner import run_digest

NOW = datetime(2024, 1, 2, tzinfo=timezone.utc)

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Site</title>
  <link href="https://atom.example.com/" rel="alternate"/>
  <entry>
    <title>Atom newest</title>
    <link rel="alternate" href="https://atom.example.com/newest"/>
    <published>2024-01-01T20:00:00Z</published>
    <summary type="html">&lt;p&gt;Newest&lt;/p&gt;</summary>
  </entry>
  <entry>
    <title>Atom ancient</title>
    <link rel="alternate" href="https://atom.example.com/ancient"/>
    <published>2020-01-01T00:00:00Z</published>
  </entry>
</feed>
"""

RSS_FEED = """<rss version="2.0"><channel>
  <item>
    <title>RSS middle</title>
    <link>https://rss.example.com/middle</link>
    <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
    <description>Middle</description>
  </item>
  <item>
    <title>RSS early</title>
    <link>https://rss.example.com/early</link>
    <pubDate>Mon, 01 Jan 2024 01:00:00 GMT</pubDate>
  </item>
</channel></rss>
"""


def _sources() -> list[Source]:
    return [
        Source("Atom Site", "https://atom.example.com/feed", "https://atom.example.com"),
        Source("RSS Site", "https://rss.example.com/rss", "https://rss.example.com"),
        Source("Broken Site", "https://broken.example.com/rss", "https://broken.example.com"),
        Source("Hanging Site", "https://hang.example.com/rss", "https://hang.example.com"),
    ]


async def _handler(request: httpx.Request) -> httpx.Response:
    host = request.url.host
    if host == "atom.example.com":
        return httpx.Response(200, text=ATOM_FEED)
    if host == "rss.example.com":
        return httpx.Response(200, text=RSS_FEED)
    if host == "broken.example.com":
        return httpx.Response(500, text="oops")
    await asyncio.sleep(30)
    return httpx.Response(200, text=RSS_FEED)


def _config(timeout_ms: int = 200, concurrency: int = 4) -> AppConfig:
    cfg = AppConfig()
    cfg.window.hours = 48
    cfg.fetch.timeout_ms = timeout_ms
    cfg.fetch.concurrency = concurrency
    return cfg


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(_handler))


def test_run_digest_merges_sorts_and_counts():
    result = run_digest(_sources(), _config(), now=NOW, client=_client())

    assert [a.title for a in result.articles] == ["Atom newest", "RSS middle", "RSS early"]
    assert result.stats.total == 4
    assert result.stats.ok == 2
    assert result.stats.failed == 2
    assert {f.error.kind for f in result.failures} == {"http_error", "timeout"}


def test_run_digest_output_invariants():
    result = run_digest(_sources(), _config(), now=NOW, client=_client())

    timestamps = [a.timestamp for a in result.articles]
    assert timestamps == sorted(timestamps, reverse=True)
    for article in result.articles:
        assert article.timestamp >= result.cutoff_ms
        assert article.title
        assert article.link


def test_hanging_source_is_bounded_by_timeout():
    start = time.monotonic()
    result = run_digest(_sources(), _config(timeout_ms=300, concurrency=1), now=NOW, client=_client())
    elapsed = time.monotonic() - start

    assert elapsed < 3
    assert result.stats.failed == 2
    assert result.stats.ok == 2


def test_run_digest_bounds_requests_in_flight():
    in_flight = 0
    peak = 0

    async def handler(request: httpx.Request) -> httpx.Response:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.02)
        in_flight -= 1
        return httpx.Response(200, text=RSS_FEED)

    sources = [Source(f"Feed {i}", f"https://feed{i}.example.com/rss") for i in range(9)]
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    result = run_digest(sources, _config(concurrency=3), now=NOW, client=client)

    assert peak == 3
    assert result.stats.ok == 9
    assert len(result.articles) == 18


def test_run_digest_with_no_sources():
    result = run_digest([], _config(), now=NOW, client=_client())

    assert result.articles == []
    assert result.stats.total == 0
    assert result.stats.completed == 0


def test_run_digest_logs_failures_and_progress():
    records: list[logging.LogRecord] = []

    class _ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    logger = logging.getLogger(LOGGER_NAME)
    handler = _ListHandler()
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        cfg = _config()
        cfg.output.progress_every = 2
        run_digest(_sources(), cfg, now=NOW, client=_client())
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)

    events = [getattr(r, "event", None) for r in records]
    assert events[0] == "run_start"
    assert events[-1] == "run_complete"
    assert events.count("fetch_failed") == 2
    assert events.count("progress") == 2
    failed = [r for r in records if getattr(r, "event", None) == "fetch_failed"]
    assert any(r.getMessage() == "✗ Broken Site: HTTP 500" for r in failed)


def test_run_digest_survives_out_of_range_dates():
    far_future = (
        "<rss><channel><item><title>Far future</title><link>https://bad.example.com/1</link>"
        "<pubDate>9999-12-31T23:59:59-05:00</pubDate></item></channel></rss>"
    )

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "bad.example.com":
            return httpx.Response(200, text=far_future)
        return httpx.Response(200, text=RSS_FEED)

    sources = [
        Source("Bad Dates", "https://bad.example.com/rss"),
        Source("RSS Site", "https://rss.example.com/rss"),
    ]
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    result = run_digest(sources, _config(), now=NOW, client=client)

    assert result.stats.ok == 2
    assert result.stats.failed == 0
    assert [a.title for a in result.articles] == ["RSS middle", "RSS early"]


def test_progress_bar_and_log_handler_share_one_console(monkeypatch):
    consoles = []

    class _FakeProgress:
        def __init__(self, *columns, console=None, transient=False):
            consoles.append(console)

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            return False

        def add_task(self, description, total=None):
            return 0

        def advance(self, task_id, advance=1):
            pass

    monkeypatch.setattr(runner, "Progress", _FakeProgress)
    logger = setup_logging(LoggingConfig(level="WARNING"))
    handler_consoles = [h.console for h in logger.handlers]
    try:
        run_digest(_sources()[:2], _config(), now=NOW, client=_client(), show_progress=True)
    finally:
        logger.handlers = []

    assert handler_consoles == [STDERR_CONSOLE]
    assert consoles == [STDERR_CONSOLE]

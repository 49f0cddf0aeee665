"""
Bounded-concurrency task pool.

Workers claim task indices from a shared cursor, so a worker that finishes
a fast source immediately moves on to the next unclaimed one instead of
waiting on a static partition.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

import httpx

from ..core.types import RunContext, Source
from .fetcher import FeedResult, fetch_source

T = TypeVar("T")


async def run_pool(tasks: Sequence[Callable[[], Awaitable[T]]], concurrency: int) -> list[T]:
    """Run zero-argument coroutine factories with at most `concurrency` in flight.

    Exactly min(concurrency, len(tasks)) workers are started. Claiming the
    next index happens between awaits, which makes it atomic on a single
    event loop.

    Args:
        tasks: Coroutine factories; each is called once
        concurrency: Maximum number of tasks awaited at the same time

    Returns:
        Task results in task order, once every worker has exited
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    results: list[T] = [None] * len(tasks)  # type: ignore[list-item]
    cursor = 0

    async def worker() -> None:
        nonlocal cursor
        while cursor < len(tasks):
            index = cursor
            cursor += 1
            results[index] = await tasks[index]()

    workers = min(concurrency, len(tasks))
    await asyncio.gather(*(worker() for _ in range(workers)))
    return results


async def fetch_all(
    sources: Sequence[Source],
    ctx: RunContext,
    client: httpx.AsyncClient,
    on_result: Callable[[FeedResult], None] | None = None,
) -> list[FeedResult]:
    """Fetch every source through the pool.

    on_result is called synchronously as each task completes, in completion
    order, so it may mutate shared state without locking.
    """

    def make_task(source: Source) -> Callable[[], Awaitable[FeedResult]]:
        async def task() -> FeedResult:
            result = await fetch_source(client, source, ctx)
            if on_result is not None:
                on_result(result)
            return result

        return task

    return await run_pool([make_task(source) for source in sources], ctx.concurrency)

"""Tests for the bounded worker pool."""

import asyncio

import pytest

from regression_runner.pool import WorkerPool, default_pool_size


@pytest.mark.parametrize(
    ("cap", "count", "expected"),
    [
        (2, 3, 2),
        (4, 1, 4),
        (None, 3, 3),
        (None, 25, 10),
        (0, 5, 5),
        (-1, 0, 1),
        (None, 0, 1),
    ],
)
def test_default_pool_size(cap: int | None, count: int, expected: int) -> None:
    """Explicit caps win, otherwise the run size bounded by the ceiling."""
    assert default_pool_size(cap, count) == expected


def test_rejects_empty_pool() -> None:
    """A pool needs at least one worker."""
    with pytest.raises(ValueError, match="at least 1"):
        WorkerPool[int](size=0)


async def test_bounds_concurrency() -> None:
    """At most ``size`` jobs run at the same time."""
    running = 0
    peak = 0

    async def job(value: int) -> int:
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return value

    async with WorkerPool[int](size=3) as pool:
        for i in range(10):
            pool.submit(lambda i=i: job(i))
        values = [value async for value in pool.as_completed()]

    assert sorted(values) == list(range(10))
    assert peak == 3


async def test_yields_in_completion_order() -> None:
    """Results are produced as jobs finish."""

    async def job(value: str, delay: float) -> str:
        await asyncio.sleep(delay)
        return value

    async with WorkerPool[str](size=3) as pool:
        pool.submit(lambda: job("slow", 0.05))
        pool.submit(lambda: job("fast", 0))
        values = [value async for value in pool.as_completed()]

    assert values == ["fast", "slow"]


async def test_cancels_pending_jobs_on_error() -> None:
    """Leaving the pool early cancels jobs still in flight."""
    started = asyncio.Event()
    cancelled = False

    async def hang() -> int:
        nonlocal cancelled
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled = True
            raise
        return 0

    with pytest.raises(RuntimeError):
        async with WorkerPool[int](size=2) as pool:
            pool.submit(hang)
            await started.wait()
            raise RuntimeError("abort")

    assert cancelled

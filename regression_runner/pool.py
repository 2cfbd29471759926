"""Bounded worker pool for parallel test execution."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from types import TracebackType

DEFAULT_POOL_CEILING = 10


def default_pool_size(
    concurrency_cap: int | None, case_count: int, ceiling: int = DEFAULT_POOL_CEILING
) -> int:
    """Return the worker count for a run.

    An explicit positive cap wins; otherwise the pool is as large as the run,
    up to ``ceiling``. The result is never below one.
    """
    if concurrency_cap is not None and concurrency_cap > 0:
        return concurrency_cap
    return max(1, min(ceiling, case_count))


@dataclass(kw_only=True)
class WorkerPool[T]:
    """Runs submitted jobs with at most ``size`` of them in flight.

    A pool is created per run and used as an async context manager; leaving
    the context cancels any job that has not finished.
    """

    size: int
    _semaphore: asyncio.Semaphore = field(init=False, repr=False)
    _tasks: list[asyncio.Task[T]] = field(init=False, default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Worker pool size must be at least 1, got {self.size}")
        self._semaphore = asyncio.Semaphore(self.size)

    async def __aenter__(self) -> "WorkerPool[T]":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def submit(self, job: Callable[[], Awaitable[T]]) -> asyncio.Task[T]:
        """Schedule a job; it starts once a worker slot is free."""
        task = asyncio.create_task(self._run(job))
        self._tasks.append(task)
        return task

    async def as_completed(self) -> AsyncIterator[T]:
        """Yield job results in the order the jobs finish."""
        for next_done in asyncio.as_completed(list(self._tasks)):
            yield await next_done

    async def _run(self, job: Callable[[], Awaitable[T]]) -> T:
        async with self._semaphore:
            return await job()

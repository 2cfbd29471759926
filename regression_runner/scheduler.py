"""Immediate, deferred and recurring dispatch of execution runs."""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from functools import partial

from regression_runner.config import TimeoutSettings
from regression_runner.executors.base import ExecutorOptions
from regression_runner.models.execution import ExecutionMode
from regression_runner.models.result import TestResult, utcnow
from regression_runner.notifications.base import Notifier, NullNotifier
from regression_runner.orchestrator import ExecutionOrchestrator
from regression_runner.persistence.base import TestCaseRepository
from regression_runner.tracker import ExecutionStatusTracker

log = logging.getLogger(__name__)

type SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, kw_only=True)
class RunOptions:
    """Per-run options forwarded untouched to the orchestrator and executors."""

    concurrency_cap: int | None = None
    headless: bool = True
    timeouts: TimeoutSettings = field(default_factory=TimeoutSettings)

    def executor_options(self) -> ExecutorOptions:
        """Return the options seen by executors."""
        return ExecutorOptions(headless=self.headless, timeouts=self.timeouts)


@dataclass(kw_only=True)
class RunScheduler:
    """Decides when a requested run executes and drives it to a terminal state.

    Runs execute as background tasks on the running event loop; ``submit``
    returns as soon as the run is registered.
    """

    orchestrator: ExecutionOrchestrator
    tracker: ExecutionStatusTracker
    notifier: Notifier = field(default_factory=NullNotifier)
    clock: Callable[[], datetime] = field(default=utcnow, repr=False)
    sleep: SleepFn = field(default=asyncio.sleep, repr=False)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, repr=False)
    _last_millis: int = field(default=0, repr=False)

    def next_execution_id(self) -> str:
        """Return a new run id, strictly increasing within the process."""
        millis = max(int(self.clock().timestamp() * 1000), self._last_millis + 1)
        self._last_millis = millis
        return f"exec_{millis}"

    async def submit(
        self,
        test_case_ids: Sequence[int],
        mode: ExecutionMode,
        options: RunOptions | None = None,
        scheduled_at: datetime | None = None,
    ) -> str:
        """Register a run and dispatch it now or at ``scheduled_at``.

        Args:
            test_case_ids: Catalog ids to execute
            mode: SEQUENTIAL or PARALLEL
            options: Pass-through options for the run
            scheduled_at: Start instant; absent or past means immediately.
                Naive datetimes are taken as local time.

        Returns:
            The run id, once the run is QUEUED (deferred) or RUNNING

        """
        options = options or RunOptions()
        ids = tuple(test_case_ids)
        execution_id = self.next_execution_id()

        if scheduled_at is not None and scheduled_at.tzinfo is None:
            scheduled_at = scheduled_at.astimezone()
        deferred = scheduled_at is not None and scheduled_at > self.clock()

        await self.tracker.create(execution_id, mode, ids, queued=deferred)

        task = asyncio.create_task(
            self._run(
                execution_id, ids, mode, options, scheduled_at if deferred else None
            ),
            name=f"run-{execution_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        if deferred:
            log.info("Run %s queued for %s", execution_id, scheduled_at)
        else:
            log.info("Run %s dispatched", execution_id)
        return execution_id

    async def wait_idle(self) -> None:
        """Wait until every dispatched run, including deferred ones, finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel all runs still waiting or executing."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _run(
        self,
        execution_id: str,
        test_case_ids: Sequence[int],
        mode: ExecutionMode,
        options: RunOptions,
        scheduled_at: datetime | None,
    ) -> None:
        if scheduled_at is not None:
            await self.sleep(max(0.0, (scheduled_at - self.clock()).total_seconds()))

        try:
            if scheduled_at is not None:
                await self.tracker.mark_running(execution_id)
            results = await self.orchestrator.run(
                test_case_ids,
                mode,
                execution_id=execution_id,
                concurrency_cap=options.concurrency_cap,
                options=options.executor_options(),
                on_result=partial(self.tracker.record_result, execution_id),
            )
        except Exception as e:
            log.error("Run %s failed: %s", execution_id, e, exc_info=e)
            await self._record_failure(execution_id, e)
            return

        await self._record_completion(execution_id, results)

    async def _record_failure(self, execution_id: str, error: Exception) -> None:
        try:
            await self.tracker.mark_failed(execution_id, str(error) or repr(error))
        except Exception as e:
            log.error("Run %s: could not record failure: %s", execution_id, e, exc_info=e)

    async def _record_completion(
        self, execution_id: str, results: Sequence[TestResult]
    ) -> None:
        try:
            status = await self.tracker.mark_completed(execution_id, results)
        except Exception as e:
            log.error(
                "Run %s: could not record completion: %s", execution_id, e, exc_info=e
            )
            return

        log.info(
            "Run %s completed: total=%s passed=%s failed=%s skipped=%s",
            execution_id,
            status.total_tests,
            status.passed_tests,
            status.failed_tests,
            status.skipped_tests,
        )
        try:
            await self.notifier.on_run_completed(execution_id, results)
        except Exception as e:
            log.error(
                "Run %s: completion notification failed: %s",
                execution_id,
                e,
                exc_info=e,
            )


def next_occurrence(now: datetime, at: time, weekday: int | None = None) -> datetime:
    """Return the first instant after ``now`` at time ``at``.

    With ``weekday`` set (Monday is 0) only that day of the week qualifies.
    """
    candidate = now.replace(
        hour=at.hour, minute=at.minute, second=at.second, microsecond=0
    )
    if weekday is not None:
        candidate += timedelta(days=(weekday - now.weekday()) % 7)
    if candidate <= now:
        candidate += timedelta(days=1 if weekday is None else 7)
    return candidate


@dataclass(kw_only=True)
class RecurringTrigger:
    """Submits the whole catalog in PARALLEL mode at a fixed local time."""

    scheduler: RunScheduler
    catalog: TestCaseRepository
    at: time
    weekday: int | None = None
    options: RunOptions = field(default_factory=RunOptions)
    _task: asyncio.Task[None] | None = field(default=None, repr=False)

    def start(self) -> None:
        """Start the background timer loop."""
        if self._task is None:
            self._task = asyncio.create_task(self._loop(), name="recurring-trigger")

    async def stop(self) -> None:
        """Stop the background timer loop."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def fire(self) -> str:
        """Submit a run covering the current catalog."""
        ids = [test_case.id for test_case in await self.catalog.find_all()]
        log.info("Recurring regression: submitting %d test case(s)", len(ids))
        return await self.scheduler.submit(ids, "PARALLEL", self.options)

    async def _loop(self) -> None:
        now = self.scheduler.clock().astimezone()
        while True:
            target = next_occurrence(now, self.at, self.weekday)
            log.info("Next recurring regression at %s", target)
            # sleeps may return early; each occurrence fires once the clock reaches it
            while now < target:
                await self.scheduler.sleep((target - now).total_seconds())
                now = self.scheduler.clock().astimezone()
            try:
                await self.fire()
            except Exception as e:
                log.error("Recurring regression not submitted: %s", e, exc_info=e)

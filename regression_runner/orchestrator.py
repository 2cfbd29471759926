"""Execution orchestrator running a batch of test cases for one run."""

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from regression_runner.executors.base import ExecutorOptions, TestExecutor
from regression_runner.executors.registry import ExecutorRegistry
from regression_runner.models.catalog import TestCase
from regression_runner.models.execution import ExecutionMode
from regression_runner.models.result import TestResult
from regression_runner.notifications.base import Notifier, NullNotifier
from regression_runner.persistence.base import ResultRepository, TestCaseRepository
from regression_runner.pool import DEFAULT_POOL_CEILING, WorkerPool, default_pool_size

log = logging.getLogger(__name__)

type ResultCallback = Callable[[TestResult], Awaitable[None]]


@dataclass(frozen=True, kw_only=True)
class ExecutionOrchestrator:
    """Runs test cases through their executors and records every outcome.

    Each result is tagged with the run id, persisted and, when FAILED,
    notified as soon as it is produced. Nothing is retried.
    """

    catalog: TestCaseRepository
    executors: ExecutorRegistry
    results: ResultRepository
    notifier: Notifier = field(default_factory=NullNotifier)
    pool_ceiling: int = DEFAULT_POOL_CEILING

    async def run(
        self,
        test_case_ids: Sequence[int],
        mode: ExecutionMode,
        *,
        execution_id: str,
        concurrency_cap: int | None = None,
        options: ExecutorOptions | None = None,
        on_result: ResultCallback | None = None,
    ) -> Sequence[TestResult]:
        """Execute the given test cases for one run.

        Args:
            test_case_ids: Catalog ids to run; unknown ids are skipped
            mode: SEQUENTIAL keeps input order, PARALLEL uses a worker pool
            execution_id: Identifier of the owning run
            concurrency_cap: Worker count for PARALLEL runs
            options: Pass-through options for the executors
            on_result: Called with every result right after it is persisted

        Returns:
            One result per resolved id, in input order for SEQUENTIAL runs and
            in arrival order for PARALLEL runs

        """
        options = replace(options or ExecutorOptions(), execution_id=execution_id)
        test_cases = await self.catalog.find_by_ids(test_case_ids)
        if len(test_cases) < len(test_case_ids):
            log.info(
                "Run %s: skipping %d unknown test case id(s)",
                execution_id,
                len(test_case_ids) - len(test_cases),
            )
        if not test_cases:
            log.info("Run %s: no test cases to execute", execution_id)
            return []

        executors = self.executors.bind(test_cases)
        log.info(
            "Run %s: executing %d test case(s) in %s mode",
            execution_id,
            len(test_cases),
            mode,
        )

        if mode == "SEQUENTIAL":
            return await self._run_sequential(
                test_cases, executors, options, execution_id, on_result
            )
        return await self._run_parallel(
            test_cases, executors, options, execution_id, concurrency_cap, on_result
        )

    async def _run_sequential(
        self,
        test_cases: Sequence[TestCase],
        executors: Mapping[int, TestExecutor | None],
        options: ExecutorOptions,
        execution_id: str,
        on_result: ResultCallback | None,
    ) -> Sequence[TestResult]:
        results: list[TestResult] = []
        for test_case in test_cases:
            result = await self._execute_and_tag(
                test_case, executors.get(test_case.id), options, execution_id
            )
            results.append(await self._record(result, execution_id, on_result))
        return results

    async def _run_parallel(
        self,
        test_cases: Sequence[TestCase],
        executors: Mapping[int, TestExecutor | None],
        options: ExecutorOptions,
        execution_id: str,
        concurrency_cap: int | None,
        on_result: ResultCallback | None,
    ) -> Sequence[TestResult]:
        size = default_pool_size(concurrency_cap, len(test_cases), self.pool_ceiling)
        log.info("Run %s: worker pool of %d", execution_id, size)

        results: list[TestResult] = []
        async with WorkerPool[TestResult](size=size) as pool:
            for test_case in test_cases:
                pool.submit(
                    lambda tc=test_case: self._execute_and_tag(
                        tc, executors.get(tc.id), options, execution_id
                    )
                )
            async for result in pool.as_completed():
                results.append(await self._record(result, execution_id, on_result))
        return results

    async def _execute_and_tag(
        self,
        test_case: TestCase,
        executor: TestExecutor | None,
        options: ExecutorOptions,
        execution_id: str,
    ) -> TestResult:
        """Execute one test case, never raising."""
        try:
            result = await self.executors.execute(test_case, options, executor)
        except Exception as e:
            log.error(
                "Run %s: execution of %s failed: %s",
                execution_id,
                test_case.name,
                e,
                exc_info=e,
            )
            result = TestResult(
                test_case_id=test_case.id,
                test_case_name=test_case.name,
                status="FAILED",
                message=f"Execution failed: {e}",
            )
        return result.tagged(execution_id)

    async def _record(
        self,
        result: TestResult,
        execution_id: str,
        on_result: ResultCallback | None,
    ) -> TestResult:
        """Persist a result, then surface it to the tracker and the notifier."""
        saved = await self.results.save(result)
        log.info(
            "Test completed: run=%s test=%s status=%s",
            execution_id,
            saved.test_case_name,
            saved.status,
        )
        if on_result is not None:
            await on_result(saved)
        if saved.status == "FAILED":
            await self._notify_failure(execution_id, saved)
        return saved

    async def _notify_failure(self, execution_id: str, result: TestResult) -> None:
        try:
            await self.notifier.on_test_failed(execution_id, result)
        except Exception as e:
            log.error(
                "Run %s: failure alert for %s not delivered: %s",
                execution_id,
                result.test_case_name,
                e,
                exc_info=e,
            )

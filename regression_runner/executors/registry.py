"""Registry selecting an executor for each test case."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from regression_runner.executors.base import ExecutorOptions, TestExecutor
from regression_runner.models.catalog import TestCase
from regression_runner.models.result import TestResult

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ExecutorRegistry:
    """Maps executor keys (test type or explicit key) to executors."""

    executors: Mapping[str, TestExecutor] = field(default_factory=dict)

    def with_executor(self, key: str, executor: TestExecutor) -> "ExecutorRegistry":
        """Return a registry that also serves ``key``."""
        return ExecutorRegistry(executors={**self.executors, key: executor})

    def select(self, test_case: TestCase) -> TestExecutor | None:
        """Return the executor for a test case, if one is registered."""
        return self.executors.get(test_case.resolved_executor_key)

    def bind(self, test_cases: Iterable[TestCase]) -> Mapping[int, TestExecutor | None]:
        """Select executors once for a snapshot of the catalog."""
        return {test_case.id: self.select(test_case) for test_case in test_cases}

    async def execute(
        self,
        test_case: TestCase,
        options: ExecutorOptions,
        executor: TestExecutor | None = None,
    ) -> TestResult:
        """Execute a test case, capturing every failure as a result.

        Never raises: a test case without an executor is SKIPPED and an
        exception from the executor becomes a FAILED result.
        """
        executor = executor or self.select(test_case)
        if executor is None:
            log.warning(
                "No executor for test case %s (key=%s)",
                test_case.name,
                test_case.resolved_executor_key,
            )
            return TestResult(
                test_case_id=test_case.id,
                test_case_name=test_case.name,
                status="SKIPPED",
                message=f"Unknown test type: {test_case.resolved_executor_key}",
            )

        try:
            return await executor.execute(test_case, options)
        except Exception as e:
            log.error("Test %s raised: %s", test_case.name, e, exc_info=e)
            return TestResult(
                test_case_id=test_case.id,
                test_case_name=test_case.name,
                status="FAILED",
                message=f"Test execution failed: {e}",
            )

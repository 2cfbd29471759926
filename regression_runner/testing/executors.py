"""Scripted executors for exercising the orchestration core."""

import asyncio
from dataclasses import dataclass, field

from regression_runner.executors.base import ExecutorOptions, TestExecutor
from regression_runner.models.catalog import TestCase
from regression_runner.models.result import ResultStatus, TestResult


@dataclass(frozen=True, kw_only=True)
class ScriptedExecutor(TestExecutor):
    """Executor whose outcome per test case name is set up front.

    Names mapped to an exception raise it; names absent from ``outcomes``
    pass. Every call is appended to ``calls`` along with its options.
    """

    outcomes: dict[str, ResultStatus | Exception] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    calls: list[tuple[str, ExecutorOptions]] = field(default_factory=list)

    async def execute(self, test_case: TestCase, options: ExecutorOptions) -> TestResult:
        self.calls.append((test_case.name, options))
        if delay := self.delays.get(test_case.name):
            await asyncio.sleep(delay)

        outcome = self.outcomes.get(test_case.name, "PASSED")
        if isinstance(outcome, Exception):
            raise outcome
        return TestResult(
            test_case_id=test_case.id,
            test_case_name=test_case.name,
            status=outcome,
            message=f"{test_case.name} {outcome.lower()}",
        )

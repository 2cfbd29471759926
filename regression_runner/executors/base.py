"""Abstract base class for test executors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from regression_runner.config import TimeoutSettings
from regression_runner.models.catalog import TestCase
from regression_runner.models.result import TestResult


@dataclass(frozen=True, kw_only=True)
class ExecutorOptions:
    """Opaque pass-through options forwarded to every executor."""

    headless: bool = True
    execution_id: str | None = None
    timeouts: TimeoutSettings = field(default_factory=TimeoutSettings)


@dataclass(frozen=True, kw_only=True)
class TestExecutor(ABC):
    """Performs the steps of a test case and judges pass or fail.

    Executors are expected to bound their own duration using the timeouts in
    the options. Failures of the check itself are reported as FAILED results.
    """

    __test__ = False

    @abstractmethod
    async def execute(self, test_case: TestCase, options: ExecutorOptions) -> TestResult:
        """Run a single test case.

        Args:
            test_case: Catalog entry to execute
            options: Pass-through execution options for this run

        Returns:
            Result for the test case, not yet tagged with a run id

        """

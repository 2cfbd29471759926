"""Abstract storage interfaces consumed by the orchestration core."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from regression_runner.models.catalog import NewTestCase, TestCase
from regression_runner.models.execution import ExecutionRecord
from regression_runner.models.result import TestResult


class TestCaseRepository(ABC):
    """Catalog of test cases."""

    __test__ = False

    @abstractmethod
    async def find_all(self) -> Sequence[TestCase]:
        """Return every test case in identity order."""

    @abstractmethod
    async def find_by_ids(self, ids: Iterable[int]) -> Sequence[TestCase]:
        """Return the test cases for the given ids.

        One entry is returned per requested id, in request order. Duplicated
        ids yield duplicated entries and unknown ids are dropped.
        """

    @abstractmethod
    async def find_by_name(self, name: str) -> TestCase | None:
        """Return the test case with the given canonical name, if any."""

    @abstractmethod
    async def save(self, test_case: NewTestCase) -> TestCase:
        """Store a new test case and return it with its assigned identity."""


class ResultRepository(ABC):
    """Store of individual test results."""

    @abstractmethod
    async def save(self, result: TestResult) -> TestResult:
        """Persist a result and return the stored value."""

    @abstractmethod
    async def find_by_execution_id(self, execution_id: str) -> Sequence[TestResult]:
        """Return the results of a run in persistence order."""


class ExecutionRecordRepository(ABC):
    """Store of durable run summaries."""

    @abstractmethod
    async def save(self, record: ExecutionRecord) -> ExecutionRecord:
        """Insert or replace the record keyed by its execution id."""

    @abstractmethod
    async def find(self, execution_id: str) -> ExecutionRecord | None:
        """Return the record for a run, if any."""

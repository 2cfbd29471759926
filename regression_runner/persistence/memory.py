"""In-memory storage implementations."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from regression_runner.models.catalog import NewTestCase, TestCase
from regression_runner.models.execution import ExecutionRecord
from regression_runner.models.result import TestResult
from regression_runner.persistence.base import (
    ExecutionRecordRepository,
    ResultRepository,
    TestCaseRepository,
)


class DuplicateTestCaseError(Exception):
    """Raised when a test case name is already present in the catalog."""


@dataclass(kw_only=True)
class InMemoryTestCaseRepository(TestCaseRepository):
    """Catalog held in a dictionary, identities assigned sequentially."""

    __test__ = False

    _cases: dict[int, TestCase] = field(default_factory=dict)
    _next_id: int = 1

    async def find_all(self) -> Sequence[TestCase]:
        return [self._cases[key] for key in sorted(self._cases)]

    async def find_by_ids(self, ids: Iterable[int]) -> Sequence[TestCase]:
        return [self._cases[i] for i in ids if i in self._cases]

    async def find_by_name(self, name: str) -> TestCase | None:
        return next((tc for tc in self._cases.values() if tc.name == name), None)

    async def save(self, test_case: NewTestCase) -> TestCase:
        if await self.find_by_name(test_case.name) is not None:
            raise DuplicateTestCaseError(f"Test case '{test_case.name}' already exists")

        stored = TestCase(id=self._next_id, **test_case.model_dump())
        self._next_id += 1
        self._cases[stored.id] = stored
        return stored


@dataclass(kw_only=True)
class InMemoryResultRepository(ResultRepository):
    """Append-only list of results."""

    saved: list[TestResult] = field(default_factory=list)

    async def save(self, result: TestResult) -> TestResult:
        self.saved.append(result)
        return result

    async def find_by_execution_id(self, execution_id: str) -> Sequence[TestResult]:
        return [r for r in self.saved if r.execution_id == execution_id]


@dataclass(kw_only=True)
class InMemoryExecutionRecordRepository(ExecutionRecordRepository):
    """Execution records keyed by execution id."""

    records: dict[str, ExecutionRecord] = field(default_factory=dict)

    async def save(self, record: ExecutionRecord) -> ExecutionRecord:
        self.records[record.execution_id] = record
        return record

    async def find(self, execution_id: str) -> ExecutionRecord | None:
        return self.records.get(execution_id)

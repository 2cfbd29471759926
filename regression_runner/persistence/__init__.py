"""Storage interfaces and implementations."""

from regression_runner.persistence.base import (
    ExecutionRecordRepository,
    ResultRepository,
    TestCaseRepository,
)
from regression_runner.persistence.files import JsonFileExecutionRecordRepository
from regression_runner.persistence.memory import (
    DuplicateTestCaseError,
    InMemoryExecutionRecordRepository,
    InMemoryResultRepository,
    InMemoryTestCaseRepository,
)

__all__ = [
    "DuplicateTestCaseError",
    "ExecutionRecordRepository",
    "InMemoryExecutionRecordRepository",
    "InMemoryResultRepository",
    "InMemoryTestCaseRepository",
    "JsonFileExecutionRecordRepository",
    "ResultRepository",
    "TestCaseRepository",
]

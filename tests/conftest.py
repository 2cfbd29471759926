"""Shared fixtures for the orchestration core."""

from collections.abc import Generator, Sequence

import pytest
from aioresponses import aioresponses as aioresponses_cls

from regression_runner.executors.registry import ExecutorRegistry
from regression_runner.models.catalog import NewTestCase, TestCase
from regression_runner.orchestrator import ExecutionOrchestrator
from regression_runner.persistence.memory import (
    InMemoryExecutionRecordRepository,
    InMemoryResultRepository,
    InMemoryTestCaseRepository,
)
from regression_runner.scheduler import RunScheduler
from regression_runner.testing.executors import ScriptedExecutor
from regression_runner.testing.notifiers import RecordingNotifier
from regression_runner.testing.timers import ManualTimer
from regression_runner.tracker import ExecutionStatusTracker


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Intercept aiohttp requests."""
    with aioresponses_cls() as mocked:
        yield mocked


@pytest.fixture
def catalog() -> InMemoryTestCaseRepository:
    """Create an empty catalog."""
    return InMemoryTestCaseRepository()


@pytest.fixture
async def seeded_cases(catalog: InMemoryTestCaseRepository) -> Sequence[TestCase]:
    """Populate the catalog with tc1, tc2 and tc3 (ids 1, 2 and 3)."""
    return [
        await catalog.save(NewTestCase(name=name, type=test_type))
        for name, test_type in (("tc1", "API"), ("tc2", "API"), ("tc3", "UI"))
    ]


@pytest.fixture
def executor() -> ScriptedExecutor:
    """Create an executor passing every test case."""
    return ScriptedExecutor()


@pytest.fixture
def registry(executor: ScriptedExecutor) -> ExecutorRegistry:
    """Serve both test types with the scripted executor."""
    return ExecutorRegistry(executors={"API": executor, "UI": executor})


@pytest.fixture
def results() -> InMemoryResultRepository:
    """Create an empty result store."""
    return InMemoryResultRepository()


@pytest.fixture
def records() -> InMemoryExecutionRecordRepository:
    """Create an empty execution record store."""
    return InMemoryExecutionRecordRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Create a notifier recording events."""
    return RecordingNotifier()


@pytest.fixture
def orchestrator(
    catalog: InMemoryTestCaseRepository,
    registry: ExecutorRegistry,
    results: InMemoryResultRepository,
    notifier: RecordingNotifier,
) -> ExecutionOrchestrator:
    """Create an orchestrator over the in-memory stores."""
    return ExecutionOrchestrator(
        catalog=catalog, executors=registry, results=results, notifier=notifier
    )


@pytest.fixture
def tracker(records: InMemoryExecutionRecordRepository) -> ExecutionStatusTracker:
    """Create a status tracker over the in-memory record store."""
    return ExecutionStatusTracker(records=records)


@pytest.fixture
def timer() -> ManualTimer:
    """Create a manually fired timer."""
    return ManualTimer()


@pytest.fixture
def scheduler(
    orchestrator: ExecutionOrchestrator,
    tracker: ExecutionStatusTracker,
    notifier: RecordingNotifier,
    timer: ManualTimer,
) -> RunScheduler:
    """Create a scheduler whose deferred runs wait for the manual timer."""
    return RunScheduler(
        orchestrator=orchestrator,
        tracker=tracker,
        notifier=notifier,
        sleep=timer.sleep,
    )

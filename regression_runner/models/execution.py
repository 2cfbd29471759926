"""Models describing the lifecycle of an execution run."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from pydantic import Field

from regression_runner.models.base import Model
from regression_runner.models.result import TestResult

type ExecutionMode = Literal["SEQUENTIAL", "PARALLEL"]
type RunState = Literal["QUEUED", "RUNNING", "COMPLETED", "FAILED"]

TERMINAL_STATES: frozenset[RunState] = frozenset({"COMPLETED", "FAILED"})


class ExecutionRecord(Model):
    """Durable run summary, the source of truth across restarts."""

    execution_id: str = Field(..., description="Globally unique run identifier")
    status: RunState = Field(..., description="Current lifecycle state")
    mode: ExecutionMode = Field(..., description="Execution mode of the run")
    test_case_ids: Sequence[int] = Field(
        default_factory=tuple, description="Requested test case ids, in order"
    )
    start_time: datetime | None = Field(
        default=None, description="Set when the run starts executing"
    )
    end_time: datetime | None = Field(
        default=None, description="Set when the run reaches a terminal state"
    )
    total_tests: int | None = None
    passed_tests: int | None = None
    failed_tests: int | None = None
    skipped_tests: int | None = None
    error_message: str | None = Field(
        default=None, description="Set only when the run FAILED"
    )

    @property
    def test_case_ids_csv(self) -> str:
        """Requested ids serialized as a comma-separated list."""
        return ",".join(str(test_case_id) for test_case_id in self.test_case_ids)


@dataclass(kw_only=True)
class ExecutionStatus:
    """Live in-memory view of a run, including the results produced so far."""

    execution_id: str
    status: RunState
    mode: ExecutionMode
    test_case_ids: Sequence[int] = ()
    start_time: datetime | None = None
    end_time: datetime | None = None
    results: list[TestResult] = field(default_factory=list)
    total_tests: int | None = None
    passed_tests: int | None = None
    failed_tests: int | None = None
    skipped_tests: int | None = None
    error_message: str | None = None

    @property
    def is_terminal(self) -> bool:
        """Whether the run has reached COMPLETED or FAILED."""
        return self.status in TERMINAL_STATES

    def to_record(self) -> ExecutionRecord:
        """Project the live view onto its durable summary."""
        return ExecutionRecord(
            execution_id=self.execution_id,
            status=self.status,
            mode=self.mode,
            test_case_ids=tuple(self.test_case_ids),
            start_time=self.start_time,
            end_time=self.end_time,
            total_tests=self.total_tests,
            passed_tests=self.passed_tests,
            failed_tests=self.failed_tests,
            skipped_tests=self.skipped_tests,
            error_message=self.error_message,
        )

"""Lifecycle tracking of execution runs.

Every run has a live :class:`ExecutionStatus` held in memory for fast polling
and a durable :class:`ExecutionRecord` that survives restarts. Each transition
is committed in two steps, the live view first and the durable record second.
Readers may briefly observe the live view ahead of the durable one. A run
whose first record cannot be stored is withdrawn from the live view.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime

from regression_runner.models.execution import (
    ExecutionMode,
    ExecutionRecord,
    ExecutionStatus,
    RunState,
)
from regression_runner.models.result import TestResult, utcnow
from regression_runner.persistence.base import ExecutionRecordRepository

log = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Mapping[RunState, frozenset[RunState]] = {
    "QUEUED": frozenset({"RUNNING"}),
    "RUNNING": frozenset({"COMPLETED", "FAILED"}),
    "COMPLETED": frozenset(),
    "FAILED": frozenset(),
}


class UnknownExecutionError(Exception):
    """Raised when a run id is not tracked."""


class DuplicateExecutionError(Exception):
    """Raised when a run id is registered twice."""


class InvalidTransitionError(Exception):
    """Raised on a state change the run lifecycle does not allow."""


@dataclass(kw_only=True)
class ExecutionStatusTracker:
    """Authoritative state machine for every run of the process.

    With ``retention`` unset, entries stay in memory for the lifetime of the
    process. A positive ``retention`` evicts the oldest finished runs from the
    live map once more than that many runs are tracked; their durable records
    remain available through :meth:`load_record`.
    """

    records: ExecutionRecordRepository
    retention: int | None = None
    clock: Callable[[], datetime] = field(default=utcnow, repr=False)
    _statuses: dict[str, ExecutionStatus] = field(default_factory=dict, repr=False)

    async def create(
        self,
        execution_id: str,
        mode: ExecutionMode,
        test_case_ids: Sequence[int],
        *,
        queued: bool,
    ) -> ExecutionStatus:
        """Register a new run, QUEUED when deferred and RUNNING otherwise."""
        if execution_id in self._statuses:
            raise DuplicateExecutionError(f"Execution {execution_id} already exists")

        status = ExecutionStatus(
            execution_id=execution_id,
            status="QUEUED" if queued else "RUNNING",
            mode=mode,
            test_case_ids=tuple(test_case_ids),
            start_time=None if queued else self.clock(),
        )
        self._statuses[execution_id] = status
        try:
            await self.records.save(status.to_record())
        except Exception:
            del self._statuses[execution_id]
            raise
        self._evict()
        log.info("Run %s created in state %s", execution_id, status.status)
        return self.snapshot(status)

    async def mark_running(self, execution_id: str) -> ExecutionStatus:
        """Move a QUEUED run to RUNNING, stamping its start time now."""
        status = self._transition(execution_id, "RUNNING")
        status.start_time = self.clock()
        return await self._commit(status)

    async def record_result(self, execution_id: str, result: TestResult) -> None:
        """Append a result to the live view of a running run."""
        status = self._get(execution_id)
        if status.status != "RUNNING":
            raise InvalidTransitionError(
                f"Execution {execution_id} is {status.status}, cannot record results"
            )
        status.results.append(result)

    async def mark_completed(
        self, execution_id: str, results: Sequence[TestResult]
    ) -> ExecutionStatus:
        """Move a RUNNING run to COMPLETED with counts from its results."""
        status = self._transition(execution_id, "COMPLETED")
        status.end_time = self.clock()
        status.results = list(results)
        status.total_tests = len(results)
        status.passed_tests = sum(1 for r in results if r.status == "PASSED")
        status.failed_tests = sum(1 for r in results if r.status == "FAILED")
        status.skipped_tests = sum(1 for r in results if r.status == "SKIPPED")
        return await self._commit(status)

    async def mark_failed(self, execution_id: str, error: str) -> ExecutionStatus:
        """Move a RUNNING run to FAILED, keeping the results recorded so far."""
        status = self._transition(execution_id, "FAILED")
        status.end_time = self.clock()
        status.error_message = error
        return await self._commit(status)

    def get_status(self, execution_id: str) -> ExecutionStatus | None:
        """Return a point-in-time copy of a run's live view."""
        status = self._statuses.get(execution_id)
        return None if status is None else self.snapshot(status)

    def list_statuses(self) -> Mapping[str, ExecutionStatus]:
        """Return point-in-time copies of every tracked run."""
        return {key: self.snapshot(status) for key, status in self._statuses.items()}

    async def load_record(self, execution_id: str) -> ExecutionRecord | None:
        """Return the durable summary of a run."""
        return await self.records.find(execution_id)

    @staticmethod
    def snapshot(status: ExecutionStatus) -> ExecutionStatus:
        """Copy a live status so later transitions do not show through."""
        return replace(status, results=list(status.results))

    def _get(self, execution_id: str) -> ExecutionStatus:
        try:
            return self._statuses[execution_id]
        except KeyError:
            raise UnknownExecutionError(f"Unknown execution {execution_id}") from None

    def _transition(self, execution_id: str, target: RunState) -> ExecutionStatus:
        status = self._get(execution_id)
        if target not in ALLOWED_TRANSITIONS[status.status]:
            raise InvalidTransitionError(
                f"Execution {execution_id}: {status.status} -> {target} not allowed"
            )
        log.info("Run %s: %s -> %s", execution_id, status.status, target)
        status.status = target
        return status

    async def _commit(self, status: ExecutionStatus) -> ExecutionStatus:
        await self.records.save(status.to_record())
        return self.snapshot(status)

    def _evict(self) -> None:
        if self.retention is None or len(self._statuses) <= self.retention:
            return
        finished = [key for key, status in self._statuses.items() if status.is_terminal]
        for key in finished[: len(self._statuses) - self.retention]:
            log.debug("Evicting run %s from live status map", key)
            del self._statuses[key]

"""Models for test execution results."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Literal

type ResultStatus = Literal["PASSED", "FAILED", "SKIPPED"]


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Outcome of running one test case within one run."""

    __test__ = False

    test_case_id: int
    test_case_name: str
    status: ResultStatus
    executed_at: datetime = field(default_factory=utcnow)
    message: str | None = None
    execution_id: str | None = None
    screenshot_path: str | None = None
    api_request_path: str | None = None
    api_response_path: str | None = None

    def tagged(self, execution_id: str) -> "TestResult":
        """Return a copy of this result owned by the given run."""
        return replace(self, execution_id=execution_id)

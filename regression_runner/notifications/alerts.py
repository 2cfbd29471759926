"""Plain-text alerts delivered through logging."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from regression_runner.models.result import TestResult
from regression_runner.notifications.base import Notifier


def summarize(results: Sequence[TestResult]) -> Mapping[str, Any]:
    """Compute the counts and pass rate of a run."""
    total = len(results)
    passed = sum(1 for r in results if r.status == "PASSED")
    failed = sum(1 for r in results if r.status == "FAILED")
    skipped = sum(1 for r in results if r.status == "SKIPPED")
    return {
        "total": total,
        "passed": passed,
        "failed": failed,
        "skipped": skipped,
        "pass_rate": passed / total * 100 if total else 0.0,
    }


def format_run_summary(execution_id: str, results: Sequence[TestResult]) -> str:
    """Render the completion summary of a run."""
    summary = summarize(results)
    lines = [
        "Test Execution Summary",
        "=====================",
        f"Execution ID: {execution_id}",
        f"Total Tests: {summary['total']}",
        f"Passed: {summary['passed']}",
        f"Failed: {summary['failed']}",
        f"Skipped: {summary['skipped']}",
        f"Pass Rate: {summary['pass_rate']:.2f}%",
    ]
    failures = [r for r in results if r.status == "FAILED"]
    if failures:
        lines.append("")
        lines.append("Failed Tests:")
        lines.extend(f"- {r.test_case_name}: {r.message}" for r in failures)
    return "\n".join(lines)


def format_failure_alert(execution_id: str, result: TestResult) -> str:
    """Render the alert for a single failed test."""
    return "\n".join(
        [
            "Test Failure Alert",
            "==================",
            f"Execution ID: {execution_id}",
            f"Test Case: {result.test_case_name}",
            f"Failed At: {result.executed_at.isoformat()}",
            f"Error Message: {result.message}",
        ]
    )


@dataclass(frozen=True, kw_only=True)
class LoggingNotifier(Notifier):
    """Writes alerts to a logger."""

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("regression_runner.alerts")
    )

    async def on_test_failed(self, execution_id: str, result: TestResult) -> None:
        self.logger.warning("%s", format_failure_alert(execution_id, result))

    async def on_run_completed(
        self, execution_id: str, results: Sequence[TestResult]
    ) -> None:
        self.logger.info("%s", format_run_summary(execution_id, results))

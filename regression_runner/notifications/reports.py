"""CSV report written when a run completes."""

import asyncio
import csv
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from regression_runner.models.result import TestResult, utcnow
from regression_runner.notifications.base import Notifier

log = logging.getLogger(__name__)

CSV_HEADER = ("Test Case ID", "Test Case Name", "Status", "Executed At", "Message")


@dataclass(frozen=True, kw_only=True)
class CsvReportNotifier(Notifier):
    """Writes one CSV report per completed run."""

    directory: Path
    clock: Callable[[], datetime] = field(default=utcnow, repr=False)

    def report_path(self, execution_id: str) -> Path:
        """Return the report file name for a run generated now."""
        timestamp = self.clock().strftime("%Y%m%d_%H%M%S")
        return self.directory / f"test_report_{execution_id}_{timestamp}.csv"

    async def on_test_failed(self, execution_id: str, result: TestResult) -> None:
        return None

    async def on_run_completed(
        self, execution_id: str, results: Sequence[TestResult]
    ) -> None:
        path = self.report_path(execution_id)
        await asyncio.to_thread(write_csv_report, path, results)
        log.info("Report for %s written to %s", execution_id, path)


def write_csv_report(path: Path, results: Sequence[TestResult]) -> None:
    """Write results to a CSV file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_HEADER)
        for result in results:
            writer.writerow(
                (
                    result.test_case_id,
                    result.test_case_name,
                    result.status,
                    result.executed_at.isoformat(),
                    result.message or "",
                )
            )

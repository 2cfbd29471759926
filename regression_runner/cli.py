"""CLI entry point for running regression suites."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from regression_runner.app import open_runner
from regression_runner.config import load_settings
from regression_runner.models.execution import ExecutionMode, ExecutionStatus
from regression_runner.scheduler import RunOptions
from regression_runner.suites import available_suites

STATUS_SYMBOLS = {
    "PASSED": "✅",
    "FAILED": "❌",
    "SKIPPED": "⏭️",
}


def log_results_summary(log: logging.Logger, status: ExecutionStatus) -> None:
    """Log a formatted summary of a run and its test results."""
    log.info("=" * 80)
    log.info("Execution %s: %s", status.execution_id, status.status)
    log.info("=" * 80)

    for result in status.results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info("%s %s: %s", symbol, result.test_case_name, result.status)
        if result.message:
            log.info("  Message: %s", result.message)
        for artifact in (
            result.screenshot_path,
            result.api_request_path,
            result.api_response_path,
        ):
            if artifact:
                log.info("  Artifact: %s", artifact)

    if status.error_message:
        log.info("Run error: %s", status.error_message)


def parse_test_case_ids(test_case_ids: str) -> Sequence[int]:
    """Parse comma-separated test case ids."""
    if not test_case_ids.strip():
        return ()
    return tuple(int(s.strip()) for s in test_case_ids.split(",") if s.strip())


def format_output(status: ExecutionStatus) -> dict[str, Any]:
    """Format a run for JSON output."""
    results = [
        {
            "test_case_id": result.test_case_id,
            "test_case_name": result.test_case_name,
            "status": result.status,
            "executed_at": result.executed_at.isoformat(),
            "message": result.message,
        }
        for result in status.results
    ]

    return {
        "execution_id": status.execution_id,
        "status": status.status,
        "mode": status.mode,
        "total": status.total_tests or 0,
        "passed": status.passed_tests or 0,
        "failed": status.failed_tests or 0,
        "skipped": status.skipped_tests or 0,
        "error": status.error_message,
        "results": results,
    }


async def run(
    test_case_ids: Sequence[int],
    suite_id: str | None,
    mode: ExecutionMode,
    max_parallel: int | None = None,
    headless: bool | None = None,
    scheduled_at: datetime | None = None,
    config_path: Path | None = None,
) -> int:
    """Run test cases and return exit code."""
    log = logging.getLogger("regression_runner")
    settings = load_settings(config_path)

    async with open_runner(settings) as runner:
        ids = list(test_case_ids)
        if not ids and suite_id is not None:
            ids = list(await runner.suites.resolve(suite_id))
            log.info("Suite %s resolved to %d test case(s)", suite_id, len(ids))

        if not ids:
            log.info("No test cases to run")
            print(json.dumps({"total": 0, "results": []}))
            return 0

        options = RunOptions(
            concurrency_cap=max_parallel,
            headless=settings.headless if headless is None else headless,
            timeouts=settings.timeouts,
        )
        execution_id = await runner.scheduler.submit(ids, mode, options, scheduled_at)
        log.info("Submitted run %s (%d test case(s))", execution_id, len(ids))

        await runner.scheduler.wait_idle()
        status = runner.tracker.get_status(execution_id)

    if status is None:
        raise RuntimeError(f"Run {execution_id} is not tracked")

    log_results_summary(log, status)
    print(json.dumps(format_output(status), indent=2))

    if status.status != "COMPLETED" or status.failed_tests:
        return 1
    return 0


async def serve(config_path: Path | None = None) -> int:
    """Run the recurring regression trigger until interrupted."""
    log = logging.getLogger("regression_runner")
    settings = load_settings(config_path)

    async with open_runner(settings) as runner:
        trigger = runner.recurring_trigger(settings)
        if trigger is None:
            log.error("No recurring schedule configured")
            return 2
        trigger.start()
        try:
            await asyncio.Event().wait()
        finally:
            await trigger.stop()
    return 0  # pragma: no cover


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run regression test suites")
    selection = parser.add_mutually_exclusive_group(required=True)
    selection.add_argument(
        "--suite",
        help="Suite id to run (e.g., BLAZE_SMOKE, REQRES_SMOKE)",
    )
    selection.add_argument(
        "--test-case-ids",
        help="Comma-separated catalog ids to run",
    )
    selection.add_argument(
        "--list-suites",
        action="store_true",
        help="Print the known suite ids and exit",
    )
    selection.add_argument(
        "--serve",
        action="store_true",
        help="Run the configured recurring regression until interrupted",
    )
    parser.add_argument(
        "--mode",
        choices=["SEQUENTIAL", "PARALLEL"],
        type=str.upper,
        default="PARALLEL",
        help="Execution mode",
    )
    parser.add_argument(
        "--max-parallel",
        type=int,
        default=None,
        help="Worker count for PARALLEL runs",
    )
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run browsers headless (defaults to the configured value)",
    )
    parser.add_argument(
        "--scheduled-at",
        type=datetime.fromisoformat,
        default=None,
        help="ISO-8601 start time; the run waits until then",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON settings file",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.list_suites:
        print(json.dumps(list(available_suites())))
        sys.exit(0)

    if args.serve:
        sys.exit(asyncio.run(serve(args.config)))

    exit_code = asyncio.run(
        run(
            test_case_ids=parse_test_case_ids(args.test_case_ids or ""),
            suite_id=args.suite,
            mode=args.mode,
            max_parallel=args.max_parallel,
            headless=args.headless,
            scheduled_at=args.scheduled_at,
            config_path=args.config,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

"""End-to-end runs through the production wiring."""

from pathlib import Path

import pytest
from aioresponses import aioresponses as aioresponses_cls

from regression_runner.app import open_runner
from regression_runner.config import ApiCheck, RecurringSettings, Settings
from regression_runner.persistence import JsonFileExecutionRecordRepository
from regression_runner.scheduler import RunOptions
from regression_runner.suites import BLAZE_SMOKE, REQRES_SMOKE

API_BASE_URL = "http://reqres.test/api"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings writing every artifact below the test directory."""
    return Settings(
        artifacts_dir=tmp_path / "artifacts",
        reports_dir=tmp_path / "reports",
        records_dir=tmp_path / "records",
        api_checks={
            "ReqRes_GetUsers_Page2": ApiCheck(
                url=f"{API_BASE_URL}/users?page=2", expected_keys=["data"]
            ),
            "ReqRes_GetSingleUser_Valid": ApiCheck(
                url=f"{API_BASE_URL}/users/2", expected_keys=["data"]
            ),
        },
    )


async def test_api_suite_run(
    settings: Settings, aioresponses: aioresponses_cls, tmp_path: Path
) -> None:
    """An API suite runs against the configured checks and is recorded."""
    aioresponses.get(f"{API_BASE_URL}/users?page=2", payload={"data": []})
    aioresponses.get(f"{API_BASE_URL}/users/2", status=500, body="oops")

    async with open_runner(settings) as runner:
        ids = await runner.suites.resolve("REQRES_SMOKE")
        execution_id = await runner.scheduler.submit(
            ids, "PARALLEL", RunOptions(concurrency_cap=3)
        )
        await runner.scheduler.wait_idle()
        status = runner.tracker.get_status(execution_id)
        stored = await runner.results.find_by_execution_id(execution_id)

    assert status is not None
    assert status.status == "COMPLETED"
    assert status.total_tests == len(REQRES_SMOKE)
    assert status.passed_tests == 1
    assert status.failed_tests == len(REQRES_SMOKE) - 1
    assert len(stored) == len(REQRES_SMOKE)

    by_name = {r.test_case_name: r for r in status.results}
    assert by_name["ReqRes_GetUsers_Page2"].status == "PASSED"
    assert by_name["ReqRes_GetSingleUser_Valid"].message == (
        "Expected status 200, Status: 500"
    )
    assert by_name["ReqRes_Login_Valid"].message == (
        "No API check configured for ReqRes_Login_Valid"
    )

    record = await JsonFileExecutionRecordRepository(
        directory=tmp_path / "records"
    ).find(execution_id)
    assert record is not None
    assert record.status == "COMPLETED"
    assert record.total_tests == len(REQRES_SMOKE)

    reports = list((tmp_path / "reports").glob(f"test_report_{execution_id}_*.csv"))
    assert len(reports) == 1
    assert (tmp_path / "artifacts" / execution_id).is_dir()


async def test_ui_suite_without_ui_executor_is_skipped(settings: Settings) -> None:
    """UI test cases are skipped when no UI executor is registered."""
    async with open_runner(settings) as runner:
        ids = await runner.suites.resolve("blaze_smoke")
        execution_id = await runner.scheduler.submit(ids, "SEQUENTIAL")
        await runner.scheduler.wait_idle()
        status = runner.tracker.get_status(execution_id)

    assert status is not None
    assert status.status == "COMPLETED"
    assert status.skipped_tests == len(BLAZE_SMOKE)
    assert [r.test_case_name for r in status.results] == list(BLAZE_SMOKE)
    assert {r.message for r in status.results} == {"Unknown test type: UI"}


async def test_recurring_trigger_requires_schedule(settings: Settings) -> None:
    """Only configured schedules produce a recurring trigger."""
    async with open_runner(settings) as runner:
        assert runner.recurring_trigger(settings) is None

        scheduled = settings.model_copy(
            update={"recurring": RecurringSettings(weekday=None)}
        )
        trigger = runner.recurring_trigger(scheduled)

    assert trigger is not None
    assert trigger.weekday is None

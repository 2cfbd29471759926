"""HTTP API executor implementation."""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import aiohttp

from regression_runner.config import ApiCheck
from regression_runner.executors.base import ExecutorOptions, TestExecutor
from regression_runner.executors.http_api.config import HttpApiConfig
from regression_runner.models.catalog import TestCase
from regression_runner.models.result import ResultStatus, TestResult

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ApiResponse:
    """Captured response of an API check."""

    status: int
    body: str


@dataclass(frozen=True, kw_only=True)
class HttpApiExecutor(TestExecutor):
    """Runs declarative HTTP checks against an API."""

    config: HttpApiConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: HttpApiConfig
    ) -> AsyncGenerator["HttpApiExecutor", None]:
        """Create executor with managed session lifecycle."""
        async with aiohttp.ClientSession(headers=dict(config.headers)) as session:
            yield cls(config=config, session=session)

    async def execute(self, test_case: TestCase, options: ExecutorOptions) -> TestResult:
        """Perform the API check configured for the test case."""
        check = self.config.checks.get(test_case.name)
        if check is None:
            return TestResult(
                test_case_id=test_case.id,
                test_case_name=test_case.name,
                status="FAILED",
                message=f"No API check configured for {test_case.name}",
            )

        log.info("API check %s: %s %s", test_case.name, check.method, check.url)
        try:
            response = await self.send(check, options.timeouts.api_request)
        except (aiohttp.ClientError, TimeoutError) as e:
            return TestResult(
                test_case_id=test_case.id,
                test_case_name=test_case.name,
                status="FAILED",
                message=f"API request failed: {e!r}",
            )

        status, message = evaluate_response(check, response)
        request_path, response_path = await asyncio.to_thread(
            self.write_artifacts,
            test_case,
            check,
            response,
            options.execution_id,
        )
        return TestResult(
            test_case_id=test_case.id,
            test_case_name=test_case.name,
            status=status,
            message=message,
            api_request_path=str(request_path),
            api_response_path=str(response_path),
        )

    async def send(self, check: ApiCheck, timeout: float) -> ApiResponse:
        """Send the request described by a check."""
        async with self.session.request(
            check.method,
            check.url,
            json=check.json_body,
            headers=dict(check.headers),
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            return ApiResponse(status=response.status, body=await response.text())

    def write_artifacts(
        self,
        test_case: TestCase,
        check: ApiCheck,
        response: ApiResponse,
        execution_id: str | None,
    ) -> tuple[Path, Path]:
        """Write request and response captures for a test case."""
        directory = (
            self.config.artifacts_dir / (execution_id or "unknown") / str(test_case.id)
        )
        directory.mkdir(parents=True, exist_ok=True)

        request_path = directory / "request.json"
        request_path.write_text(
            json.dumps(
                {
                    "test": test_case.name,
                    "method": check.method,
                    "url": check.url,
                    "body": check.json_body,
                },
                indent=2,
            ),
            encoding="utf-8",
        )

        response_path = directory / "response.json"
        response_path.write_text(
            json.dumps({"status": response.status, "body": response.body}, indent=2),
            encoding="utf-8",
        )
        return request_path, response_path


def evaluate_response(check: ApiCheck, response: ApiResponse) -> tuple[ResultStatus, str]:
    """Judge a response against the expectations of a check."""
    if response.status != check.expected_status:
        return (
            "FAILED",
            f"Expected status {check.expected_status}, Status: {response.status}",
        )

    if missing := missing_keys(response.body, check.expected_keys):
        return "FAILED", f"Missing keys in response: {', '.join(missing)}"

    return "PASSED", f"Status: {response.status}"


def missing_keys(body: str, expected_keys: Sequence[str]) -> Sequence[str]:
    """Return the expected top-level keys absent from a JSON body."""
    if not expected_keys:
        return []
    try:
        data: Any = json.loads(body)
    except json.JSONDecodeError:
        return list(expected_keys)
    if not isinstance(data, dict):
        return list(expected_keys)
    return [key for key in expected_keys if key not in data]

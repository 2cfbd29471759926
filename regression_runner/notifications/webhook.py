"""Webhook delivery of run notifications."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from pydantic import BaseModel, SecretStr

from regression_runner.models.result import TestResult
from regression_runner.notifications.alerts import summarize
from regression_runner.notifications.base import Notifier

log = logging.getLogger(__name__)


class WebhookConfig(BaseModel):
    """Configuration for the webhook notifier."""

    url: str
    token: SecretStr | None = None
    timeout: float = 10.0


def result_payload(result: TestResult) -> Mapping[str, Any]:
    """Serialize a result for a notification body."""
    return {
        "test_case_id": result.test_case_id,
        "test_case_name": result.test_case_name,
        "status": result.status,
        "executed_at": result.executed_at.isoformat(),
        "message": result.message,
    }


@dataclass(frozen=True, kw_only=True)
class WebhookNotifier(Notifier):
    """POSTs failure alerts and run summaries as JSON."""

    config: WebhookConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: WebhookConfig
    ) -> AsyncGenerator["WebhookNotifier", None]:
        """Create notifier with managed session lifecycle."""
        headers: dict[str, str] = {}
        if config.token is not None:
            headers["Authorization"] = f"Bearer {config.token.get_secret_value()}"
        async with aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=config.timeout),
        ) as session:
            yield cls(config=config, session=session)

    async def on_test_failed(self, execution_id: str, result: TestResult) -> None:
        await self.post(
            {
                "event": "test_failed",
                "execution_id": execution_id,
                "result": result_payload(result),
            }
        )

    async def on_run_completed(
        self, execution_id: str, results: Sequence[TestResult]
    ) -> None:
        await self.post(
            {
                "event": "run_completed",
                "execution_id": execution_id,
                "summary": summarize(results),
                "failures": [
                    result_payload(r) for r in results if r.status == "FAILED"
                ],
            }
        )

    async def post(self, payload: Mapping[str, Any]) -> None:
        """Deliver one payload to the webhook."""
        async with self.session.post(self.config.url, json=payload) as response:
            if response.status >= 300:
                text = await response.text()
                raise RuntimeError(
                    f"Webhook delivery failed: {response.status} {text}"
                )
        log.debug("Delivered %s for %s", payload["event"], payload["execution_id"])

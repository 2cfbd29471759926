"""Notification sinks fed by the orchestration core."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field

from regression_runner.models.result import TestResult

log = logging.getLogger(__name__)


class Notifier(ABC):
    """Receives per-test failure and per-run completion events."""

    @abstractmethod
    async def on_test_failed(self, execution_id: str, result: TestResult) -> None:
        """Handle one FAILED result as soon as it is persisted."""

    @abstractmethod
    async def on_run_completed(
        self, execution_id: str, results: Sequence[TestResult]
    ) -> None:
        """Handle the aggregated results of a COMPLETED run."""


class NullNotifier(Notifier):
    """Discards every event."""

    async def on_test_failed(self, execution_id: str, result: TestResult) -> None:
        return None

    async def on_run_completed(
        self, execution_id: str, results: Sequence[TestResult]
    ) -> None:
        return None


@dataclass(frozen=True, kw_only=True)
class CompositeNotifier(Notifier):
    """Fans events out to several sinks.

    A failing sink is logged and does not prevent delivery to the others.
    """

    notifiers: Sequence[Notifier] = field(default_factory=tuple)

    async def on_test_failed(self, execution_id: str, result: TestResult) -> None:
        for notifier in self.notifiers:
            try:
                await notifier.on_test_failed(execution_id, result)
            except Exception as e:
                log.error(
                    "Failure alert via %s failed for %s: %s",
                    type(notifier).__name__,
                    execution_id,
                    e,
                    exc_info=e,
                )

    async def on_run_completed(
        self, execution_id: str, results: Sequence[TestResult]
    ) -> None:
        for notifier in self.notifiers:
            try:
                await notifier.on_run_completed(execution_id, results)
            except Exception as e:
                log.error(
                    "Run notification via %s failed for %s: %s",
                    type(notifier).__name__,
                    execution_id,
                    e,
                    exc_info=e,
                )

"""Wiring of the orchestration components from settings."""

import logging
from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass

from regression_runner.catalog import seed_catalog
from regression_runner.config import Settings
from regression_runner.executors.loading import load_executor_manifest
from regression_runner.executors.registry import ExecutorRegistry
from regression_runner.notifications import (
    CompositeNotifier,
    CsvReportNotifier,
    LoggingNotifier,
    Notifier,
    WebhookConfig,
    WebhookNotifier,
)
from regression_runner.orchestrator import ExecutionOrchestrator
from regression_runner.persistence import (
    ExecutionRecordRepository,
    InMemoryExecutionRecordRepository,
    InMemoryResultRepository,
    InMemoryTestCaseRepository,
    JsonFileExecutionRecordRepository,
    ResultRepository,
    TestCaseRepository,
)
from regression_runner.scheduler import RecurringTrigger, RunScheduler
from regression_runner.suites import SuiteResolver
from regression_runner.tracker import ExecutionStatusTracker

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Runner:
    """The assembled orchestration core."""

    catalog: TestCaseRepository
    results: ResultRepository
    tracker: ExecutionStatusTracker
    orchestrator: ExecutionOrchestrator
    scheduler: RunScheduler
    suites: SuiteResolver

    def recurring_trigger(self, settings: Settings) -> RecurringTrigger | None:
        """Return the recurring full-catalog trigger, if configured."""
        if settings.recurring is None:
            return None
        return RecurringTrigger(
            scheduler=self.scheduler,
            catalog=self.catalog,
            at=settings.recurring.at,
            weekday=settings.recurring.weekday,
        )


def build_runner(
    *,
    catalog: TestCaseRepository,
    executors: ExecutorRegistry,
    notifier: Notifier,
    records: ExecutionRecordRepository,
    results: ResultRepository | None = None,
    pool_ceiling: int = 10,
) -> Runner:
    """Assemble the core from its collaborators."""
    if results is None:
        results = InMemoryResultRepository()
    tracker = ExecutionStatusTracker(records=records)
    orchestrator = ExecutionOrchestrator(
        catalog=catalog,
        executors=executors,
        results=results,
        notifier=notifier,
        pool_ceiling=pool_ceiling,
    )
    scheduler = RunScheduler(orchestrator=orchestrator, tracker=tracker, notifier=notifier)
    return Runner(
        catalog=catalog,
        results=results,
        tracker=tracker,
        orchestrator=orchestrator,
        scheduler=scheduler,
        suites=SuiteResolver(catalog=catalog),
    )


@asynccontextmanager
async def open_runner(settings: Settings) -> AsyncGenerator[Runner, None]:
    """Create a runner with a seeded catalog and managed executor sessions."""
    async with AsyncExitStack() as stack:
        manifest = load_executor_manifest("API")
        api_config = manifest.config_cls(
            checks=settings.api_checks, artifacts_dir=settings.artifacts_dir
        )
        api_executor = await stack.enter_async_context(
            manifest.executor_factory(api_config)
        )
        executors = ExecutorRegistry().with_executor(manifest.key, api_executor)

        notifiers: list[Notifier] = [
            LoggingNotifier(),
            CsvReportNotifier(directory=settings.reports_dir),
        ]
        if settings.webhook_url:
            notifiers.append(
                await stack.enter_async_context(
                    WebhookNotifier.from_config(
                        WebhookConfig(
                            url=settings.webhook_url, token=settings.webhook_token
                        )
                    )
                )
            )

        records: ExecutionRecordRepository
        if settings.records_dir is not None:
            records = JsonFileExecutionRecordRepository(directory=settings.records_dir)
        else:
            records = InMemoryExecutionRecordRepository()

        catalog = InMemoryTestCaseRepository()
        await seed_catalog(catalog)

        runner = build_runner(
            catalog=catalog,
            executors=executors,
            notifier=CompositeNotifier(notifiers=notifiers),
            records=records,
            pool_ceiling=settings.default_concurrency_cap,
        )
        try:
            yield runner
        finally:
            await runner.scheduler.aclose()

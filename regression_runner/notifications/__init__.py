"""Notification sinks."""

from regression_runner.notifications.alerts import (
    LoggingNotifier,
    format_failure_alert,
    format_run_summary,
    summarize,
)
from regression_runner.notifications.base import (
    CompositeNotifier,
    Notifier,
    NullNotifier,
)
from regression_runner.notifications.reports import CsvReportNotifier
from regression_runner.notifications.webhook import WebhookConfig, WebhookNotifier

__all__ = [
    "CompositeNotifier",
    "CsvReportNotifier",
    "LoggingNotifier",
    "Notifier",
    "NullNotifier",
    "WebhookConfig",
    "WebhookNotifier",
    "format_failure_alert",
    "format_run_summary",
    "summarize",
]

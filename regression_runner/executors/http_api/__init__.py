"""HTTP API executor module."""

from regression_runner.executors.http_api.config import HttpApiConfig
from regression_runner.executors.http_api.executor import HttpApiExecutor
from regression_runner.executors.http_api.manifest import http_api_manifest

__all__ = ["HttpApiConfig", "HttpApiExecutor", "http_api_manifest"]

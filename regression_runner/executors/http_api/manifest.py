"""HTTP API executor manifest."""

from regression_runner.executors.http_api.config import HttpApiConfig
from regression_runner.executors.http_api.executor import HttpApiExecutor
from regression_runner.executors.manifest import ExecutorManifest

http_api_manifest = ExecutorManifest(
    key="API",
    config_cls=HttpApiConfig,
    executor_factory=HttpApiExecutor.from_config,
)

"""Executor manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from regression_runner.executors.base import TestExecutor


@dataclass(frozen=True, kw_only=True)
class ExecutorManifest[ConfigT: BaseModel]:
    """Manifest describing an executor plugin.

    The manifest names the key the executor serves, its configuration class and
    the factory creating the executor, so executors are loaded lazily by key.
    """

    key: str
    config_cls: type[ConfigT]
    executor_factory: Callable[[ConfigT], AbstractAsyncContextManager[TestExecutor]]

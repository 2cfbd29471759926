"""Tests for executor plugin loading."""

from importlib.metadata import EntryPoint, EntryPoints
from typing import Any
from unittest.mock import patch

import pytest

from regression_runner.executors.http_api import HttpApiConfig, http_api_manifest
from regression_runner.executors.loading import (
    ENTRY_POINT_GROUP,
    ExecutorNotFoundError,
    available_executors,
    load_executor_manifest,
)


def test_loads_http_api_executor() -> None:
    """The HTTP API executor is registered under the API key."""
    manifest = load_executor_manifest("API")

    assert manifest is http_api_manifest
    assert manifest.key == "API"
    assert manifest.config_cls is HttpApiConfig


def test_available_executors() -> None:
    """Installed plugins are listed by key."""
    assert "API" in available_executors()


def test_unknown_executor() -> None:
    """Unknown keys list what is available."""
    with pytest.raises(ExecutorNotFoundError, match="Available executors: .*'API'"):
        load_executor_manifest("SELENIUM")


def test_rejects_entry_point_without_manifest() -> None:
    """An entry point resolving to something else is not loaded as an executor."""
    installed = EntryPoints([EntryPoint("BROKEN", "os:sep", ENTRY_POINT_GROUP)])

    def fake_entry_points(**params: Any) -> EntryPoints:
        return installed.select(**params)

    with (
        patch("regression_runner.executors.loading.entry_points", fake_entry_points),
        pytest.raises(ExecutorNotFoundError, match="'BROKEN' \\(os:sep\\)"),
    ):
        load_executor_manifest("BROKEN")

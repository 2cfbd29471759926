"""Discovery of executor plugins registered as entry points."""

from importlib.metadata import entry_points
from typing import Any

from regression_runner.executors.manifest import ExecutorManifest

ENTRY_POINT_GROUP = "regression_runner.executors"


class ExecutorNotFoundError(Exception):
    """Raised when no usable executor plugin is registered under a key."""


def available_executors() -> list[str]:
    """Return the sorted keys of the installed executor plugins."""
    return sorted(entry.name for entry in entry_points(group=ENTRY_POINT_GROUP))


def load_executor_manifest(key: str) -> ExecutorManifest[Any]:
    """Import the manifest a plugin registers under ``key``.

    Args:
        key: Entry point name in the ``regression_runner.executors`` group,
             which is also the test type the executor serves (e.g., "API")

    Raises:
        ExecutorNotFoundError: If nothing is registered under ``key``, or the
            entry point does not refer to an :class:`ExecutorManifest`

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise ExecutorNotFoundError(
            f"Executor '{key}' not found. Available executors: {available_executors()}"
        )

    entry = next(iter(matches))
    manifest = entry.load()
    if not isinstance(manifest, ExecutorManifest):
        raise ExecutorNotFoundError(
            f"Entry point '{key}' ({entry.value}) is not an executor manifest"
        )
    return manifest

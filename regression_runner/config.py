"""Runtime configuration for the regression runner."""

import json
from collections.abc import Mapping, Sequence
from datetime import time
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr


class TimeoutSettings(BaseModel):
    """Per-executor time budgets, in seconds."""

    ui_page_load: int = 90
    ui_element_wait: int = 30
    ui_per_test: int = 120
    api_request: int = 15
    api_per_test: int = 30
    # 0 disables the global budget; forwarded to executors only
    run_global: int = 0


class ApiCheck(BaseModel):
    """Declarative HTTP check performed by the API executor."""

    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] = "GET"
    url: str
    json_body: Mapping[str, Any] | None = None
    headers: Mapping[str, str] = Field(default_factory=dict)
    expected_status: int = 200
    expected_keys: Sequence[str] = Field(
        default_factory=list,
        description="Top-level keys that must be present in a JSON response",
    )


class RecurringSettings(BaseModel):
    """Time of the recurring full-catalog regression run."""

    at: time = time(22, 0)
    # Monday is 0; None runs every day
    weekday: int | None = Field(default=5, ge=0, le=6)


class Settings(BaseModel):
    """Top-level settings document."""

    default_concurrency_cap: int = Field(default=10, ge=1)
    headless: bool = True
    timeouts: TimeoutSettings = Field(default_factory=TimeoutSettings)
    artifacts_dir: Path = Path("artifacts")
    reports_dir: Path = Path("test-output/reports")
    records_dir: Path | None = None
    api_checks: Mapping[str, ApiCheck] = Field(default_factory=dict)
    recurring: RecurringSettings | None = None
    webhook_url: str | None = None
    webhook_token: SecretStr | None = None


def load_settings(source: str | Path | None = None) -> Settings:
    """Load settings from a JSON string or a path to a JSON file.

    Without a source the defaults are returned.
    """
    if source is None:
        return Settings()
    if isinstance(source, Path):
        source = source.read_text(encoding="utf-8")
    return Settings(**json.loads(source))

"""Configuration for the HTTP API executor."""

from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from regression_runner.config import ApiCheck


class HttpApiConfig(BaseModel):
    """Configuration for the HTTP API executor."""

    # Keyed by canonical test case name
    checks: Mapping[str, ApiCheck] = Field(default_factory=dict)
    artifacts_dir: Path = Path("artifacts")
    headers: Mapping[str, str] = Field(default_factory=dict)

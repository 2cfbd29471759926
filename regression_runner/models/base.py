"""Shared pydantic base for catalog entries and execution records."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model that rejects fields it does not declare.

    Changed copies are made with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

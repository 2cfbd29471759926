"""Models for the test case catalog."""

from typing import Literal

from pydantic import Field

from regression_runner.models.base import Model

type TestType = Literal["UI", "API"]
type TestCaseStatus = Literal["PENDING", "PASSED", "FAILED", "SKIPPED"]


class NewTestCase(Model):
    """Test case definition before the catalog assigns it an identity."""

    __test__ = False

    name: str = Field(..., description="Unique canonical test case name")
    type: TestType = Field(..., description="Kind of check to perform")
    description: str = Field(default="", description="Free-text description")
    executor_key: str | None = Field(
        default=None,
        description="Explicit executor key (defaults to the test type)",
    )


class TestCase(NewTestCase):
    """Catalog entry describing one check to perform."""

    __test__ = False

    id: int = Field(..., description="Storage-assigned identifier")
    status: TestCaseStatus = Field(default="PENDING", description="Lifecycle status")

    @property
    def resolved_executor_key(self) -> str:
        """Key used to select the executor for this test case."""
        return self.executor_key or self.type

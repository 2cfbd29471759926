"""Tests for the default catalog and in-memory catalog storage."""

from collections.abc import Sequence

import pytest
from pydantic import ValidationError

from regression_runner.catalog import DEFAULT_TEST_CASES, ensure_test_case, seed_catalog
from regression_runner.models.catalog import NewTestCase, TestCase
from regression_runner.persistence.memory import (
    DuplicateTestCaseError,
    InMemoryTestCaseRepository,
)
from regression_runner.testing.factories import NewTestCaseFactory


async def test_seed_populates_empty_catalog(
    catalog: InMemoryTestCaseRepository,
) -> None:
    """Seeding an empty catalog stores every default test case."""
    seeded = await seed_catalog(catalog)

    assert [tc.name for tc in seeded] == [tc.name for tc in DEFAULT_TEST_CASES]
    assert [tc.id for tc in seeded] == list(range(1, len(DEFAULT_TEST_CASES) + 1))
    assert {tc.type for tc in seeded} == {"UI", "API"}


async def test_seed_leaves_populated_catalog_alone(
    catalog: InMemoryTestCaseRepository, seeded_cases: Sequence[TestCase]
) -> None:
    """A catalog with entries is not reseeded."""
    seeded = await seed_catalog(catalog)

    assert [tc.name for tc in seeded] == ["tc1", "tc2", "tc3"]


async def test_ensure_test_case_is_idempotent(
    catalog: InMemoryTestCaseRepository,
) -> None:
    """Ensuring the same name twice yields the same entry."""
    new = NewTestCaseFactory.build(name="ReqRes_DeleteUser")

    first = await ensure_test_case(catalog, new)
    second = await ensure_test_case(catalog, new)

    assert first == second
    assert len(await catalog.find_all()) == 1


async def test_save_rejects_duplicate_names(
    catalog: InMemoryTestCaseRepository, seeded_cases: Sequence[TestCase]
) -> None:
    """Catalog names are unique."""
    with pytest.raises(DuplicateTestCaseError, match="tc1"):
        await catalog.save(NewTestCase(name="tc1", type="UI"))


async def test_find_by_ids_keeps_order_and_duplicates(
    catalog: InMemoryTestCaseRepository, seeded_cases: Sequence[TestCase]
) -> None:
    """Lookups follow the requested order, repeat duplicates and drop unknowns."""
    found = await catalog.find_by_ids([3, 1, 7, 3])

    assert [tc.id for tc in found] == [3, 1, 3]


async def test_find_by_name(
    catalog: InMemoryTestCaseRepository, seeded_cases: Sequence[TestCase]
) -> None:
    """Entries are found by their canonical name."""
    assert await catalog.find_by_name("tc2") == seeded_cases[1]
    assert await catalog.find_by_name("missing") is None


def test_resolved_executor_key() -> None:
    """The executor key defaults to the test type."""
    by_type = TestCase(id=1, name="a", type="UI")
    explicit = TestCase(id=2, name="b", type="UI", executor_key="PLAYWRIGHT")

    assert by_type.resolved_executor_key == "UI"
    assert explicit.resolved_executor_key == "PLAYWRIGHT"


def test_test_cases_are_strict_and_frozen() -> None:
    """Undeclared fields are rejected and stored entries cannot be changed."""
    with pytest.raises(ValidationError, match="extra_forbidden"):
        NewTestCase(name="tc", type="API", owner="qa")  # type: ignore[call-arg]

    stored = TestCase(id=1, name="tc", type="API")
    with pytest.raises(ValidationError, match="frozen_instance"):
        stored.name = "renamed"  # type: ignore[misc]

"""Default test case catalog and seeding helpers."""

import logging
from collections.abc import Sequence

from regression_runner.models.catalog import NewTestCase, TestCase
from regression_runner.persistence.base import TestCaseRepository

log = logging.getLogger(__name__)

DEFAULT_TEST_CASES: Sequence[NewTestCase] = (
    NewTestCase(
        name="BlazeDemo_HomePage_Test",
        type="UI",
        description="Verify BlazeDemo homepage loads correctly",
    ),
    NewTestCase(
        name="BlazeDemo_Dropdown_Test",
        type="UI",
        description="Test departure and destination dropdowns",
    ),
    NewTestCase(
        name="BlazeDemo_FlightSearch_Boston_London",
        type="UI",
        description="Search flights from Boston to London",
    ),
    NewTestCase(
        name="BlazeDemo_FlightSearch_NewYork_Paris",
        type="UI",
        description="Search flights from New York to Paris",
    ),
    NewTestCase(
        name="BlazeDemo_ChooseFirstFlight",
        type="UI",
        description="Select the first available flight",
    ),
    NewTestCase(
        name="BlazeDemo_PriceConsistency",
        type="UI",
        description="Verify price consistency across pages",
    ),
    NewTestCase(
        name="BlazeDemo_CompleteBooking_Valid",
        type="UI",
        description="Complete booking with valid data",
    ),
    NewTestCase(
        name="BlazeDemo_Booking_EmptyFields",
        type="UI",
        description="Test booking with empty fields",
    ),
    NewTestCase(
        name="BlazeDemo_Booking_InvalidCard",
        type="UI",
        description="Test booking with invalid card",
    ),
    NewTestCase(
        name="BlazeDemo_EndToEnd_Flow",
        type="UI",
        description="Complete end-to-end booking flow",
    ),
    NewTestCase(
        name="ReqRes_GetUsers_Page2", type="API", description="Get users from page 2"
    ),
    NewTestCase(
        name="ReqRes_GetSingleUser_Valid",
        type="API",
        description="Get single user with valid ID",
    ),
    NewTestCase(
        name="ReqRes_GetSingleUser_NotFound",
        type="API",
        description="Get single user with invalid ID",
    ),
    NewTestCase(name="ReqRes_CreateUser", type="API", description="Create a new user"),
    NewTestCase(
        name="ReqRes_UpdateUser_PUT", type="API", description="Update user using PUT"
    ),
    NewTestCase(
        name="ReqRes_PatchUser", type="API", description="Update user using PATCH"
    ),
    NewTestCase(name="ReqRes_DeleteUser", type="API", description="Delete a user"),
    NewTestCase(
        name="ReqRes_Register_Valid",
        type="API",
        description="Register with valid credentials",
    ),
    NewTestCase(
        name="ReqRes_Register_MissingPassword",
        type="API",
        description="Register with missing password",
    ),
    NewTestCase(
        name="ReqRes_Login_Valid", type="API", description="Login with valid credentials"
    ),
)


async def ensure_test_case(
    repository: TestCaseRepository, test_case: NewTestCase
) -> TestCase:
    """Return the catalog entry with this name, creating it when missing."""
    if (existing := await repository.find_by_name(test_case.name)) is not None:
        return existing
    return await repository.save(test_case)


async def seed_catalog(
    repository: TestCaseRepository,
    test_cases: Sequence[NewTestCase] = DEFAULT_TEST_CASES,
) -> Sequence[TestCase]:
    """Populate an empty catalog with the given test cases.

    A catalog that already holds entries is left untouched.
    """
    if existing := await repository.find_all():
        log.info("Test catalog already populated (%d test cases)", len(existing))
        return existing

    for test_case in test_cases:
        await ensure_test_case(repository, test_case)

    catalog = await repository.find_all()
    log.info("Seeded test catalog with %d test cases", len(catalog))
    for test_case in catalog:
        log.debug("  id=%d name=%s type=%s", test_case.id, test_case.name, test_case.type)
    return catalog

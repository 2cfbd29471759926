"""Resolution of named suites to catalog test case ids."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from regression_runner.persistence.base import TestCaseRepository

log = logging.getLogger(__name__)

BLAZE_SMOKE: Sequence[str] = (
    "BlazeDemo_HomePage_Test",
    "BlazeDemo_Dropdown_Test",
    "BlazeDemo_FlightSearch_Boston_London",
    "BlazeDemo_FlightSearch_NewYork_Paris",
    "BlazeDemo_ChooseFirstFlight",
    "BlazeDemo_PriceConsistency",
    "BlazeDemo_CompleteBooking_Valid",
    "BlazeDemo_Booking_EmptyFields",
    "BlazeDemo_Booking_InvalidCard",
    "BlazeDemo_EndToEnd_Flow",
)

REQRES_SMOKE: Sequence[str] = (
    "ReqRes_GetUsers_Page2",
    "ReqRes_GetSingleUser_Valid",
    "ReqRes_GetSingleUser_NotFound",
    "ReqRes_CreateUser",
    "ReqRes_UpdateUser_PUT",
    "ReqRes_PatchUser",
    "ReqRes_DeleteUser",
    "ReqRes_Register_Valid",
    "ReqRes_Register_MissingPassword",
    "ReqRes_Login_Valid",
)

SUITES: Mapping[str, Sequence[str]] = {
    "BLAZE_SMOKE": BLAZE_SMOKE,
    "REQRES_SMOKE": REQRES_SMOKE,
    "COMBINED_SMOKE": (*BLAZE_SMOKE, *REQRES_SMOKE),
}


def available_suites(suites: Mapping[str, Sequence[str]] = SUITES) -> Sequence[str]:
    """Return the known suite ids, sorted."""
    return sorted(suites)


@dataclass(frozen=True, kw_only=True)
class SuiteResolver:
    """Maps suite ids to the current catalog ids of their member test cases.

    Suite membership is defined by canonical names because catalog ids are
    assigned by storage and differ between environments.
    """

    catalog: TestCaseRepository
    suites: Mapping[str, Sequence[str]] = field(default_factory=lambda: SUITES)

    async def resolve(self, suite_id: str | None) -> Sequence[int]:
        """Return the catalog ids of a suite's members in declared order.

        Unknown suites resolve to an empty sequence and member names missing
        from the catalog are dropped.
        """
        if suite_id is None:
            return ()

        wanted = suite_id.upper()
        names = next(
            (members for key, members in self.suites.items() if key.upper() == wanted),
            (),
        )
        if not names:
            log.info("Unknown suite %r, resolving to no test cases", suite_id)
            return ()

        by_name: dict[str, int] = {}
        for test_case in await self.catalog.find_all():
            by_name.setdefault(test_case.name, test_case.id)

        ids = [by_name[name] for name in names if name in by_name]
        if len(ids) < len(names):
            log.info(
                "Suite %s: %d of %d test case(s) not found in catalog",
                suite_id,
                len(names) - len(ids),
                len(names),
            )
        return tuple(ids)

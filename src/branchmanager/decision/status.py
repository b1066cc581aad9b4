"""Turn the validation verdict and merge outcome into a commit status."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from branchmanager.decision.checker import MergeabilityChecker
from branchmanager.decision.failures import classify
from branchmanager.decision.outcome import Clean, Conflict, Error, MergeOutcome
from branchmanager.decision.request import ChangeRequest

WAITING_DESCRIPTION = "waiting to check mergeability due to failing status(es)"
GENERIC_FAILURE_DESCRIPTION = (
    "Cannot cleanly merge to all target branches, "
    "please update changes or PR target"
)


class StatusState(StrEnum):
    """States accepted by the GitHub commit status API."""

    PENDING = "pending"
    ERROR = "error"
    FAILURE = "failure"
    SUCCESS = "success"


class ReportableStatus(BaseModel):
    """What gets published against the pull request's head revision."""

    model_config = ConfigDict(frozen=True)

    state: StatusState
    description: str


def pending() -> ReportableStatus:
    """Status while a fatal validation failure holds the check back."""
    return ReportableStatus(
        state=StatusState.PENDING, description=WAITING_DESCRIPTION
    )


def describe(
    outcome: MergeOutcome, target_branches: list[str]
) -> ReportableStatus:
    """Map a mergeability outcome to the status to report.

    Error outcomes get the generic message; their detail stays in the
    logs.

    Raises:
        TypeError: If outcome is not a MergeOutcome
    """
    if isinstance(outcome, Clean):
        return ReportableStatus(
            state=StatusState.SUCCESS,
            description=f"Merges cleanly to {', '.join(target_branches)}",
        )
    if isinstance(outcome, Conflict):
        return ReportableStatus(
            state=StatusState.FAILURE,
            description=(
                f"Unable to merge into {', '.join(outcome.failed_branches)} "
                "please update changes or PR target"
            ),
        )
    if isinstance(outcome, Error):
        return ReportableStatus(
            state=StatusState.FAILURE,
            description=GENERIC_FAILURE_DESCRIPTION,
        )
    raise TypeError(f"Not a merge outcome: {outcome!r}")


class StatusResolver:
    """Decide the reportable status of one pull request.

    The mergeability check only runs when no validation failure is
    fatal; otherwise the status stays pending until the failure clears.
    """

    def __init__(self, checker: MergeabilityChecker):
        self.checker = checker

    def resolve(self, request: ChangeRequest) -> ReportableStatus:
        if classify(request.validation_failures):
            return pending()
        outcome = self.checker.check(request)
        return describe(outcome, request.target_branches)

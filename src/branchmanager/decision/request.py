"""The pull request as seen by the decision engine."""

from pydantic import BaseModel, ConfigDict, Field

from branchmanager.decision.failures import ValidationFailure


class ChangeRequest(BaseModel):
    """A pull request loaded once per run and never modified."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(description="Pull request number")
    head_sha: str = Field(description="Head revision statuses attach to")
    base_ref: str = Field(description="Branch the pull request is opened against")
    target_branches: list[str] = Field(
        description="Branches the change must merge into, in host order"
    )
    validation_failures: list[ValidationFailure] = Field(
        default_factory=list,
        description="Problems found by the validation pass",
    )

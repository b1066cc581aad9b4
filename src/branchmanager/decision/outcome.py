"""Result of a mergeability check."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class Clean(BaseModel):
    """The change merges into every target branch."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["clean"] = "clean"


class Conflict(BaseModel):
    """The change conflicts with the listed target branches."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["conflict"] = "conflict"
    failed_branches: list[str] = Field(min_length=1)


class Error(BaseModel):
    """The check itself failed, so no branch-specific verdict exists."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"
    detail: str


MergeOutcome = Annotated[Clean | Conflict | Error, Field(discriminator="kind")]

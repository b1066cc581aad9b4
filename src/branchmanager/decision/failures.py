"""Validation failures and the fatal/advisory classification."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from branchmanager.core.log import logger


class ValidationFailure(BaseModel):
    """One problem found while validating a pull request."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(description="Human readable description")
    can_be_force_ignored: bool = Field(
        description=(
            "Advisory failures can be ignored by a caretaker; the others "
            "block the mergeability check until resolved"
        )
    )


def classify(failures: Iterable[ValidationFailure]) -> bool:
    """Return True if any failure is fatal (cannot be force ignored).

    Every failure is logged, fatal or not, so operators can see why a
    pull request is held back.
    """
    has_fatal = False
    failures = list(failures)
    if failures:
        with logger.span("Validation failures", count=len(failures)):
            for failure in failures:
                logger.info(
                    "{message}",
                    message=failure.message,
                    fatal=not failure.can_be_force_ignored,
                )
                has_fatal = has_fatal or not failure.can_be_force_ignored
    return has_fatal

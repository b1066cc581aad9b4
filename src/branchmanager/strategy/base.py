"""Capability every merge strategy provides."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from branchmanager.decision.request import ChangeRequest


@runtime_checkable
class MergeStrategy(Protocol):
    """Stages a change and tests it against the target branches.

    `prepare` materializes the change locally without judging it.
    `check` tries the change on every target branch and raises
    MergeConflictsError naming the branches it does not apply to.
    """

    def prepare(self, request: ChangeRequest) -> None:
        ...

    def check(self, request: ChangeRequest) -> None:
        ...

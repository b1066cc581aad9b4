"""Merge commit strategy: a no-commit merge into each branch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from branchmanager.strategy.errors import MergeStrategyError
from branchmanager.strategy.git import GitMergeStrategy

if TYPE_CHECKING:
    from branchmanager.decision.request import ChangeRequest


class MergeCommitStrategy(GitMergeStrategy):
    """Merge the pull request head into each target branch without
    committing, and abort the merge afterwards."""

    name = "merge"

    def apply(self, request: ChangeRequest, branch: str) -> bool:
        """Return False only when the merge stopped on conflicts.

        Raises:
            MergeStrategyError: If git failed for any other reason
        """
        merged = self.git(
            "merge_no_commit", check=False, ref=self.head_ref(request)
        )
        if merged.exited == 0:
            self.git("merge_abort", check=False)
            return True

        conflicted = self.has_conflicts()
        self.git("merge_abort", check=False)
        if not conflicted:
            raise MergeStrategyError(
                f"git merge into {branch} failed: {merged.stderr.strip()}"
            )
        return False

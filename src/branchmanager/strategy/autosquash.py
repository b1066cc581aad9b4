"""Autosquash strategy: squash fixups, then cherry-pick onto each branch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from branchmanager.core.log import logger
from branchmanager.strategy.errors import MergeStrategyError
from branchmanager.strategy.git import GitMergeStrategy

if TYPE_CHECKING:
    from branchmanager.decision.request import ChangeRequest

# Accept the autosquash todo list as generated
_NON_INTERACTIVE = {"GIT_SEQUENCE_EDITOR": "true", "GIT_EDITOR": "true"}


class AutosquashMergeStrategy(GitMergeStrategy):
    """Rebase the pull request with --autosquash on its merge base, then
    cherry-pick the resulting commits onto every target branch.

    This mirrors how the change lands when merged, with fixup! and
    squash! commits folded into their targets.
    """

    name = "autosquash"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.commits: list[str] = []

    def prepare(self, request: ChangeRequest) -> None:
        super().prepare(request)

        head = self.head_ref(request)
        base = self.git(
            "merge_base", ref=f"origin/{request.base_ref}", head=head
        ).stdout.strip()

        self.git("checkout_detached", ref=head)
        try:
            rebased = self.git(
                "rebase_autosquash", check=False, env=_NON_INTERACTIVE,
                base=base,
            )
            if rebased.exited != 0:
                self.git("rebase_abort", check=False)
                raise MergeStrategyError(
                    "Unable to autosquash the pull request commits"
                )
            squashed = self.git("rev_parse", ref="HEAD").stdout.strip()
            self.commits = self.git(
                "rev_list", revisions=f"{base}..{squashed}"
            ).stdout.split()
        finally:
            self.reset()
            self.git("checkout", check=False, ref=self.main_branch)

        logger.debug(
            "Autosquashed pull request commits",
            pr=request.number,
            commits=len(self.commits),
        )

    def apply(self, request: ChangeRequest, branch: str) -> bool:
        if not self.commits:
            return True
        picked = self.git("cherry_pick", check=False, commits=self.commits)
        if picked.exited == 0:
            return True

        conflicted = self.has_conflicts()
        self.git("cherry_pick_abort", check=False)
        if not conflicted:
            raise MergeStrategyError(
                f"git cherry-pick onto {branch} failed: "
                f"{picked.stderr.strip()}"
            )
        return False

"""Git plumbing shared by the concrete merge strategies."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from invoke import Result
from invoke.exceptions import UnexpectedExit

from branchmanager.core.log import logger
from branchmanager.core.runner import Runner, render
from branchmanager.strategy.errors import MergeConflictsError, MergeStrategyError

if TYPE_CHECKING:
    from branchmanager.decision.request import ChangeRequest


class GitMergeStrategy:
    """Check a pull request against each target branch in a local clone.

    Subclasses implement `apply`, which attempts the change on top of a
    checked out target branch and reports whether it went in cleanly.
    Every attempt is undone before the next branch is tried.
    """

    name = "git"

    def __init__(
        self,
        runner: Runner,
        workdir: Path,
        commands: dict[str, str],
        main_branch: str = "main",
        timeout: int | None = None,
    ):
        self.runner = runner
        self.workdir = workdir
        self.commands = commands
        self.main_branch = main_branch
        self.timeout = timeout

    def head_ref(self, request: ChangeRequest) -> str:
        """Local branch holding the pull request's head commits."""
        return f"pr/{request.number}/head"

    def git(
        self,
        command: str,
        check: bool = True,
        env: dict[str, str] | None = None,
        **values,
    ) -> Result:
        """Run the named git command template in the clone."""
        try:
            template = self.commands[command]
        except KeyError:
            raise MergeStrategyError(
                f"No git command template named '{command}'"
            ) from None
        try:
            result = self.runner.execute(
                render(template, **values),
                cwd=self.workdir,
                timeout=self.timeout,
                check=check,
                env=env,
            )
        except UnexpectedExit as e:
            raise MergeStrategyError(
                f"git {command} failed: {e.result.stderr.strip()}"
            ) from e
        # Runner reports a killed command as -1
        if result.exited == -1:
            raise MergeStrategyError(
                f"git {command} timed out after {self.timeout}s"
            )
        return result

    def has_conflicts(self) -> bool:
        """Whether the last attempt left unmerged paths in the index."""
        return bool(self.git("unmerged").stdout.strip())

    def prepare(self, request: ChangeRequest) -> None:
        """Fetch the pull request head and every branch it targets."""
        with logger.span("Fetching pull request", pr=request.number):
            self.git(
                "fetch_pr",
                number=request.number,
                ref=self.head_ref(request),
            )
            branches = dict.fromkeys(
                [request.base_ref, *request.target_branches]
            )
            for branch in branches:
                self.git("fetch_branch", branch=branch)

    def check(self, request: ChangeRequest) -> None:
        """Try the change on every target branch, in declared order.

        Raises:
            MergeConflictsError: naming every branch that failed
            MergeStrategyError: if git fails or times out for any reason
                other than a conflict
        """
        failed = []
        try:
            for branch in request.target_branches:
                self.git("checkout_detached", ref=f"origin/{branch}")
                with logger.span(
                    f"Applying to {branch}", strategy=self.name
                ):
                    merged = self.apply(request, branch)
                self.reset()
                if merged:
                    logger.debug(f"Applies cleanly to {branch}")
                else:
                    logger.info(f"Does not apply cleanly to {branch}")
                    failed.append(branch)
        finally:
            self.reset()
            self.git("checkout", check=False, ref=self.main_branch)

        if failed:
            raise MergeConflictsError(failed)

    def apply(self, request: ChangeRequest, branch: str) -> bool:
        """Attempt the change on the checked out branch.

        Returns False when it stopped on conflicts; any other failure
        raises MergeStrategyError.
        """
        raise NotImplementedError

    def reset(self) -> None:
        """Discard whatever an attempt left in the working tree."""
        self.git("reset_hard", check=False)
        self.git("clean", check=False)

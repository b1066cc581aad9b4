"""Clone the repository a pull request belongs to."""

from __future__ import annotations

import shutil
from pathlib import Path

from invoke.exceptions import UnexpectedExit

from branchmanager.core.config import Config
from branchmanager.core.log import logger
from branchmanager.core.runner import Runner, render


class CloneError(Exception):
    """The repository could not be cloned or prepared."""


def clone_repository(runner: Runner, config: Config, token: str) -> Path:
    """Clone config.github's repository into a fresh directory.

    Any directory left at the checkout path by an earlier run is removed
    first. The clone has the main branch checked out and a committer
    identity configured so strategies can create commits.

    Returns:
        Path of the clone

    Raises:
        CloneError: If a git command fails. The message never contains
            the clone URL, which embeds the token.
    """
    git = config.commands.get("git", {})
    path = config.git.checkout_path
    owner, repo = config.github.owner, config.github.repo
    url = config.git.clone_url.format(owner=owner, repo=repo, token=token)

    if path.exists():
        logger.debug("Removing stale checkout", path=str(path))
        shutil.rmtree(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    steps = [
        (git["clone"], {"url": url, "path": path}, path.parent),
        (git["checkout"], {"ref": config.git.main_branch}, path),
        (
            git["config"],
            {"key": "user.name", "value": config.git.committer_name},
            path,
        ),
        (
            git["config"],
            {"key": "user.email", "value": config.git.committer_email},
            path,
        ),
    ]

    with logger.span(f"Cloning {owner}/{repo}", path=str(path)):
        for template, values, cwd in steps:
            try:
                result = runner.execute(
                    render(template, **values),
                    cwd=cwd,
                    timeout=config.git.timeout,
                    redact=token,
                )
            except UnexpectedExit as e:
                raise CloneError(
                    f"Unable to prepare a clone of {owner}/{repo} "
                    f"(git exited with {e.result.exited})"
                ) from None
            if result.exited == -1:
                raise CloneError(
                    f"Unable to prepare a clone of {owner}/{repo} "
                    f"(git timed out after {config.git.timeout}s)"
                )
    return path

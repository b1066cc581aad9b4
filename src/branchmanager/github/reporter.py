"""Publish the resolved status to GitHub."""

from __future__ import annotations

from branchmanager.core.config import GitHubConfig
from branchmanager.core.log import logger
from branchmanager.decision.request import ChangeRequest
from branchmanager.decision.status import ReportableStatus
from branchmanager.github.client import GitHubClient

# GitHub rejects longer commit status descriptions
MAX_DESCRIPTION_LENGTH = 140


def truncate(description: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    if len(description) <= limit:
        return description
    return description[:limit - 1] + "…"


def report_status(
    client: GitHubClient,
    config: GitHubConfig,
    request: ChangeRequest,
    status: ReportableStatus,
) -> None:
    """Set the status on the pull request's head revision."""
    client.create_commit_status(
        config.owner,
        config.repo,
        sha=request.head_sha,
        state=status.state.value,
        description=truncate(status.description),
        context=config.status_context,
    )
    logger.info(
        f"Reported {status.state.value}: {status.description}",
        pr=request.number,
        sha=request.head_sha,
    )

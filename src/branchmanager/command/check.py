"""Check command - decide and report mergeability of one pull request."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, SecretStr

from branchmanager.core.log import logger
from branchmanager.github.auth import github_token
from branchmanager.github.client import GitHubClient
from branchmanager.github.errors import parse_pull_request_number

if TYPE_CHECKING:
    from branchmanager.core.config import State


class CheckCommand(BaseModel):
    """Check whether a pull request merges cleanly into all of its target
    branches and report the result as a commit status.

    Repository, credentials and strategy come from config.yaml, .env or
    --config.* flags.
    """

    pr: str = Field(description="Number of the pull request to check")

    async def run_workflow(self, state: State) -> int:
        """Run the check workflow.

        The GitHub token is held for the whole run and revoked when it
        ends, whether the run succeeded or raised.

        Returns:
            Exit code (0 once a status has been reported)

        Raises:
            InvalidPullRequestError: If pr is not a pull request number
            AuthenticationError: If no GitHub token is available
            GitHubError, CloneError: If the run cannot complete
        """
        from pydantic_graph import End

        from branchmanager.workflow.graph import create_workflow
        from branchmanager.workflow.nodes.clone import Clone

        number = parse_pull_request_number(self.pr)
        github = state.config.github
        runtime = state.runtime.check
        logger.info(
            f"Checking mergeability of {github.owner}/{github.repo}#{number}"
        )

        with github_token(github) as token, GitHubClient(
            token, github.api_url, github.timeout
        ) as client:
            runtime.pr_number = number
            runtime.token = SecretStr(token)
            runtime.client = client

            workflow = create_workflow()
            async with workflow.iter(Clone(), state=state) as run:
                async for node in run:
                    if isinstance(node, End):
                        logger.info(
                            "Check complete", state=node.data.state.value
                        )

        if not runtime.reported:
            logger.error("Check ended without reporting a status")
            return 1
        return 0

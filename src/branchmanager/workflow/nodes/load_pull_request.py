"""LoadPullRequest node - fetch and validate the pull request."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from branchmanager.core.config import State
from branchmanager.github.pull_request import load_pull_request


@dataclass
class LoadPullRequest(BaseNode[State]):
    """Build the ChangeRequest, including its validation failures."""

    async def run(self, ctx: GraphRunContext[State]) -> "ResolveStatus":
        runtime = ctx.state.runtime.check
        runtime.request = load_pull_request(
            runtime.client, ctx.state.config, runtime.pr_number
        )

        from branchmanager.workflow.nodes.resolve_status import ResolveStatus
        return ResolveStatus()

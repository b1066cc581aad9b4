"""Clone node - check out the repository the pull request targets."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from branchmanager.core.config import State
from branchmanager.core.runner import Runner
from branchmanager.git.clone import clone_repository


@dataclass
class Clone(BaseNode[State]):
    """Clone the repository into a fresh working directory."""

    async def run(self, ctx: GraphRunContext[State]) -> "LoadPullRequest":
        runtime = ctx.state.runtime.check
        runtime.workdir = clone_repository(
            Runner(), ctx.state.config, runtime.token.get_secret_value()
        )

        from branchmanager.workflow.nodes.load_pull_request import (
            LoadPullRequest,
        )
        return LoadPullRequest()

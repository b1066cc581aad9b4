"""ResolveStatus node - decide the status to report."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from branchmanager.core.config import State
from branchmanager.core.log import logger
from branchmanager.core.runner import Runner
from branchmanager.decision.checker import MergeabilityChecker
from branchmanager.decision.status import StatusResolver
from branchmanager.strategy import create_strategy


@dataclass
class ResolveStatus(BaseNode[State]):
    """Run the validation verdict and merge check through the resolver."""

    async def run(self, ctx: GraphRunContext[State]) -> "Report":
        config = ctx.state.config
        runtime = ctx.state.runtime.check

        strategy = create_strategy(
            config.strategy.name, Runner(), runtime.workdir, config
        )
        resolver = StatusResolver(MergeabilityChecker(strategy))
        runtime.status = resolver.resolve(runtime.request)

        logger.info(
            f"Resolved status {runtime.status.state.value}",
            description=runtime.status.description,
            strategy=config.strategy.name,
        )

        from branchmanager.workflow.nodes.report import Report
        return Report()

"""Report node - publish the status and end the run."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from branchmanager.core.config import State
from branchmanager.decision.status import ReportableStatus
from branchmanager.github.reporter import report_status


@dataclass
class Report(BaseNode[State, None, ReportableStatus]):
    """Publish the resolved status on the pull request's head revision."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> End[ReportableStatus]:
        runtime = ctx.state.runtime.check
        report_status(
            runtime.client,
            ctx.state.config.github,
            runtime.request,
            runtime.status,
        )
        runtime.reported = True
        return End(runtime.status)

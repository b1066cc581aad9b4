"""Graph workflow definition."""

from pydantic_graph import Graph

from branchmanager.core.config import State
from branchmanager.core.log import logger


def create_workflow():
    """Create the check workflow graph.

    Clone → LoadPullRequest → ResolveStatus → Report → End

    Each step needs the previous one's result, so the graph is a
    straight line.

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    # Imported here so node return annotations resolve at graph build
    from branchmanager.workflow.nodes.clone import Clone
    from branchmanager.workflow.nodes.load_pull_request import (
        LoadPullRequest,
    )
    from branchmanager.workflow.nodes.report import Report
    from branchmanager.workflow.nodes.resolve_status import ResolveStatus

    return Graph(
        nodes=(Clone, LoadPullRequest, ResolveStatus, Report),
        state_type=State,
    )

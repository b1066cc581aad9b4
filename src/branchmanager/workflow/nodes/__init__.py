"""Workflow nodes for the check graph."""

from branchmanager.workflow.nodes.clone import Clone
from branchmanager.workflow.nodes.load_pull_request import LoadPullRequest
from branchmanager.workflow.nodes.report import Report
from branchmanager.workflow.nodes.resolve_status import ResolveStatus

__all__ = [
    "Clone",
    "LoadPullRequest",
    "ResolveStatus",
    "Report",
]

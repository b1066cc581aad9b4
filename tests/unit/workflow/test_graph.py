"""Tests for the check workflow graph."""

import asyncio
from unittest.mock import Mock, patch

from pydantic import SecretStr
from pydantic_graph import End

from branchmanager.core.config import State
from branchmanager.decision import ChangeRequest, ReportableStatus, StatusState
from branchmanager.workflow.graph import create_workflow
from branchmanager.workflow.nodes import Clone


def test_graph_contains_every_node():
    workflow = create_workflow()

    assert set(workflow.node_defs) == {
        "Clone", "LoadPullRequest", "ResolveStatus", "Report"
    }


def test_nodes_run_in_order(mock_argv, github_env, tmp_path):
    state = State()
    runtime = state.runtime.check
    runtime.pr_number = 3
    runtime.token = SecretStr("t")
    runtime.client = Mock()
    request = ChangeRequest(
        number=3, head_sha="abc", base_ref="main", target_branches=["main"]
    )
    status = ReportableStatus(
        state=StatusState.SUCCESS, description="Merges cleanly to main"
    )

    async def walk():
        visited, output = [], None
        async with create_workflow().iter(Clone(), state=state) as run:
            async for node in run:
                visited.append(type(node).__name__)
                if isinstance(node, End):
                    output = node.data
        return visited, output

    with (
        patch(
            "branchmanager.workflow.nodes.clone.clone_repository",
            return_value=tmp_path,
        ) as clone,
        patch(
            "branchmanager.workflow.nodes.load_pull_request.load_pull_request",
            return_value=request,
        ),
        patch(
            "branchmanager.workflow.nodes.resolve_status.StatusResolver"
        ) as resolver_cls,
        patch(
            "branchmanager.workflow.nodes.report.report_status"
        ) as report,
    ):
        resolver_cls.return_value.resolve.return_value = status
        visited, result = asyncio.run(walk())

    assert visited[-4:] == ["LoadPullRequest", "ResolveStatus", "Report", "End"]
    assert result == status
    assert clone.call_args.args[2] == "t"
    assert runtime.workdir == tmp_path
    assert runtime.request == request
    report.assert_called_once_with(
        runtime.client, state.config.github, request, status
    )
    assert runtime.reported is True


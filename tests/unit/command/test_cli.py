"""Tests for the command line entry point."""

from unittest.mock import AsyncMock, patch

import pytest
from pydantic_settings import CliApp

from branchmanager.cli import CliState
from branchmanager.github import AuthenticationError


def run_cli(*args):
    with pytest.raises(SystemExit) as excinfo:
        CliApp.run(CliState, cli_args=list(args))
    return excinfo.value.code


def test_check_exit_code_comes_from_workflow(mock_argv, github_env):
    with patch(
        "branchmanager.command.check.CheckCommand.run_workflow",
        new=AsyncMock(return_value=0),
    ) as run_workflow:
        assert run_cli("check", "--pr", "12") == 0

    run_workflow.assert_awaited_once()


def test_check_failure_exits_nonzero(mock_argv, github_env):
    with patch(
        "branchmanager.command.check.CheckCommand.run_workflow",
        new=AsyncMock(side_effect=AuthenticationError("no token")),
    ):
        assert run_cli("check", "--pr", "12") == 1


def test_invalid_number_exits_nonzero(mock_argv, github_env):
    assert run_cli("check", "--pr", "twelve") == 1

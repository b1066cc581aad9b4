"""Pytest configuration and fixtures for branchmanager tests."""

import sys
import tempfile
from pathlib import Path

import pytest

from branchmanager.core.log import ConsoleSink, setup_logger


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging for the whole test session.

    Nothing is sent to logfire.dev and httpx is left uninstrumented.
    """
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "branchmanager-tests",
        run_name="test",
        console=ConsoleSink(level="debug"),
        instrument_httpx=False,
    )


@pytest.fixture
def mock_argv():
    """Give pydantic-settings a clean argv and restore pytest's after."""
    original = sys.argv.copy()
    sys.argv = ["branchmanager"]
    yield
    sys.argv = original


@pytest.fixture
def github_env(monkeypatch):
    """Minimal environment to load a State: the repository identity."""
    monkeypatch.setenv("BRANCHMANAGER_CONFIG__GITHUB__OWNER", "angular")
    monkeypatch.setenv("BRANCHMANAGER_CONFIG__GITHUB__REPO", "dev-infra")
    monkeypatch.setenv(
        "BRANCHMANAGER_CONFIG__LOGGER__INSTRUMENT_HTTPX", "false"
    )
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def test_config(mock_argv, github_env):
    """Config loaded through the full State machinery."""
    from branchmanager.core.config import State

    return State().config

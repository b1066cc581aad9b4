"""Tests for template substitution and source priority."""

import sys
from pathlib import Path

import platformdirs
import pytest

from branchmanager.core.config import State


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


def test_config_reference_templates_substituted(
    mock_argv, github_env, monkeypatch
):
    """Templates like {config.github.repo} are substituted."""
    monkeypatch.setenv(
        "BRANCHMANAGER_CONFIG__GIT__CHECKOUT_DIR",
        "{config.github.repo}-checkout",
    )

    state = State()

    assert state.config.git.checkout_dir == "dev-infra-checkout"


def test_platformdirs_templates_substituted(
    mock_argv, github_env, monkeypatch
):
    monkeypatch.setenv(
        "BRANCHMANAGER_CONFIG__GIT__WORKDIR_ROOT",
        "{platformdirs.user_cache_dir}",
    )

    state = State()

    expected = platformdirs.user_cache_dir("branchmanager", appauthor=False)
    assert state.config.git.workdir_root == Path(expected)


def test_runtime_parameter_templates_preserved(test_config):
    """Runtime templates like {owner} and {ref} are left for later."""
    assert "{owner}" in test_config.git.clone_url
    assert "{token}" in test_config.git.clone_url
    assert "{ref}" in test_config.commands["git"]["checkout"]
    assert "{log_root}" in test_config.logger.file.path


def test_env_overrides_yaml_defaults(mock_argv, github_env, monkeypatch):
    monkeypatch.setenv("BRANCHMANAGER_CONFIG__STRATEGY__NAME", "merge")
    monkeypatch.setenv(
        "BRANCHMANAGER_CONFIG__VALIDATION__FAILING_CI_FATAL", "true"
    )

    config = State().config

    assert config.strategy.name == "merge"
    assert config.validation.failing_ci_fatal is True
    # Untouched defaults still come from YAML
    assert config.github.status_context == "Branch Manager"


def test_cli_include_overrides_defaults(fixtures_dir, mock_argv, github_env):
    sys.argv = [
        "branchmanager",
        "--include",
        str(fixtures_dir / "override_strategy.yaml"),
    ]

    config = State().config

    assert config.strategy.name == "merge"
    assert config.validation.target_labels == ["target: major"]


def test_defaults(test_config):
    assert test_config.github.owner == "angular"
    assert test_config.github.repo == "dev-infra"
    assert test_config.github.token is None
    assert test_config.strategy.name == "autosquash"
    assert test_config.git.checkout_path.name == "branch-manager-repo"
    assert test_config.validation.backport_label_prefix == "backport: "
    assert "fetch_pr" in test_config.commands["git"]
    assert test_config.run_name == "angular-dev-infra"

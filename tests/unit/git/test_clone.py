"""Tests for cloning the repository under check."""

import shutil

import pytest

from branchmanager.core.runner import Runner
from branchmanager.git.clone import CloneError, clone_repository

pytestmark = pytest.mark.skipif(
    shutil.which("git") is None, reason="git is not installed"
)


@pytest.fixture
def config(isolated_git, test_config, origin, tmp_path):
    """Configuration cloning from the local origin into tmp_path."""
    test_config.git.clone_url = str(origin.path)
    test_config.git.workdir_root = tmp_path / "work"
    return test_config


def test_clone_checks_out_main(config, run_git):
    path = clone_repository(Runner(), config, "secret")

    assert path == config.git.checkout_path
    assert run_git(path, "rev-parse", "--abbrev-ref", "HEAD") == "main"
    assert (path / "file.txt").read_text() == "base\n"


def test_clone_configures_committer(config, run_git):
    path = clone_repository(Runner(), config, "secret")

    assert run_git(path, "config", "user.name") == config.git.committer_name
    assert run_git(path, "config", "user.email") == (
        config.git.committer_email
    )


def test_stale_checkout_replaced(config):
    stale = config.git.checkout_path
    stale.mkdir(parents=True)
    (stale / "leftover.txt").write_text("from an earlier run\n")

    path = clone_repository(Runner(), config, "secret")

    assert not (path / "leftover.txt").exists()
    assert (path / "file.txt").exists()


def test_clone_failure_hides_token(config, tmp_path):
    config.git.clone_url = str(tmp_path / "missing-{token}")

    with pytest.raises(CloneError) as excinfo:
        clone_repository(Runner(), config, "supersecret")

    assert "supersecret" not in str(excinfo.value)
    assert excinfo.value.__cause__ is None
    assert "angular/dev-infra" in str(excinfo.value)


def test_missing_main_branch(config):
    config.git.main_branch = "does-not-exist"

    with pytest.raises(CloneError):
        clone_repository(Runner(), config, "secret")


def test_timed_out_clone_raises(config):
    config.git.timeout = 2
    config.commands["git"]["clone"] = "sleep 10"

    with pytest.raises(CloneError, match="timed out"):
        clone_repository(Runner(), config, "secret")

"""Fixtures building throwaway git repositories with pull request refs."""

import subprocess
from pathlib import Path

import pytest
import yaml

from branchmanager.core import yaml_settings
from branchmanager.decision.request import ChangeRequest

DEFAULTS = Path(yaml_settings.__file__).parent.parent / "defaults" / "default.yaml"


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    )
    return result.stdout.strip()


def commit(repo: Path, filename: str, content: str, message: str) -> str:
    (repo / filename).write_text(content)
    git(repo, "add", filename)
    git(repo, "commit", "-q", "-m", message)
    return git(repo, "rev-parse", "HEAD")


class Origin:
    """Stand-in for the GitHub repository: branches plus refs/pull/*."""

    def __init__(self, path: Path):
        self.path = path

    def open_pull_request(self, number, commits, base="main"):
        """Create refs/pull/<number>/head from (file, content, message)
        commits on top of base, and return the head sha."""
        branch = f"feature-{number}"
        git(self.path, "checkout", "-q", "-b", branch, base)
        for filename, content, message in commits:
            head = commit(self.path, filename, content, message)
        git(self.path, "update-ref", f"refs/pull/{number}/head", head)
        git(self.path, "checkout", "-q", "main")
        return head

    def change_branch(self, branch, filename, content):
        git(self.path, "checkout", "-q", branch)
        commit(self.path, filename, content, f"change {filename} on {branch}")
        git(self.path, "checkout", "-q", "main")


@pytest.fixture(scope="session")
def git_commands():
    """The git command templates shipped in the package defaults."""
    with open(DEFAULTS, encoding="utf-8") as f:
        return yaml.safe_load(f)["config"]["commands"]["git"]


@pytest.fixture
def isolated_git(tmp_path, monkeypatch):
    """Keep the user's git configuration out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for role in ("AUTHOR", "COMMITTER"):
        monkeypatch.setenv(f"GIT_{role}_NAME", "Test Author")
        monkeypatch.setenv(f"GIT_{role}_EMAIL", "test@example.com")


@pytest.fixture
def origin(tmp_path, isolated_git):
    """Repository with main and a 20.x release branch."""
    path = tmp_path / "origin"
    path.mkdir()
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    commit(path, "file.txt", "base\n", "initial commit")
    git(path, "branch", "20.x")
    return Origin(path)


@pytest.fixture
def clone(tmp_path, origin):
    path = tmp_path / "clone"
    git(tmp_path, "clone", "-q", str(origin.path), str(path))
    return path


@pytest.fixture
def run_git():
    """The git helper, for assertions on repository state."""
    return git


@pytest.fixture
def make_request():
    """Factory for ChangeRequests targeting main and 20.x by default."""
    def factory(number, head_sha, targets=("main", "20.x")):
        return ChangeRequest(
            number=number,
            head_sha=head_sha,
            base_ref=targets[0],
            target_branches=list(targets),
        )
    return factory

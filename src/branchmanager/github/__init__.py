"""GitHub collaborators: credentials, API client, loading and reporting."""

from branchmanager.github.auth import github_token, resolve_token
from branchmanager.github.client import GitHubClient
from branchmanager.github.errors import (
    AuthenticationError,
    GitHubError,
    InvalidPullRequestError,
    parse_pull_request_number,
)
from branchmanager.github.pull_request import load_pull_request
from branchmanager.github.reporter import report_status

__all__ = [
    "AuthenticationError",
    "GitHubClient",
    "GitHubError",
    "InvalidPullRequestError",
    "github_token",
    "load_pull_request",
    "parse_pull_request_number",
    "report_status",
    "resolve_token",
]

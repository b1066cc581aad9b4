"""Errors talking to GitHub or identifying the pull request.

These end the run: they are never turned into a commit status.
"""


class GitHubError(Exception):
    """A GitHub API request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(GitHubError):
    """No usable credential for GitHub."""


class InvalidPullRequestError(ValueError):
    """The pull request identifier given to the run is not usable."""


def parse_pull_request_number(value: str | int) -> int:
    """Parse a pull request number from user input.

    Raises:
        InvalidPullRequestError: If value is not a positive integer
    """
    try:
        number = int(str(value).strip())
    except ValueError:
        raise InvalidPullRequestError(
            f"The provided pr value was not a number: {value!r}"
        ) from None
    if number <= 0:
        raise InvalidPullRequestError(
            f"The provided pr value must be positive: {number}"
        )
    return number

"""Minimal GitHub REST client."""

from __future__ import annotations

from typing import Any

import httpx

from branchmanager.core.log import logger
from branchmanager.github.errors import GitHubError


class GitHubClient:
    """The handful of GitHub REST endpoints a check run needs.

    Usable as a context manager; the underlying connection pool is
    released on exit.
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            base_url=api_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "branchmanager",
            },
        )

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GitHubError(
                f"{method} {path} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise GitHubError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return None
        return response.json()

    def get_pull_request(self, owner: str, repo: str, number: int) -> dict:
        return self._request("GET", f"/repos/{owner}/{repo}/pulls/{number}")

    def get_combined_status(self, owner: str, repo: str, ref: str) -> dict:
        """Latest status of every context on a commit."""
        return self._request(
            "GET", f"/repos/{owner}/{repo}/commits/{ref}/status"
        )

    def create_commit_status(
        self,
        owner: str,
        repo: str,
        sha: str,
        state: str,
        description: str,
        context: str,
    ) -> dict:
        logger.debug(
            "Creating commit status",
            sha=sha,
            state=state,
            context=context,
        )
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/statuses/{sha}",
            json={
                "state": state,
                "description": description,
                "context": context,
            },
        )

    def revoke_token(self) -> None:
        """Revoke the installation token this client authenticates with."""
        self._request("DELETE", "/installation/token")

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

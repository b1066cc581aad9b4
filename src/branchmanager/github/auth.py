"""Scoped GitHub credential."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from branchmanager.core.config import GitHubConfig
from branchmanager.core.log import logger
from branchmanager.github.client import GitHubClient
from branchmanager.github.errors import AuthenticationError, GitHubError


def resolve_token(config: GitHubConfig) -> str:
    """Pick the configured token, falling back to GITHUB_TOKEN.

    Raises:
        AuthenticationError: If neither is set
    """
    if config.token is not None and config.token.get_secret_value():
        return config.token.get_secret_value()
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token
    raise AuthenticationError(
        "No GitHub token configured (set config.github.token or "
        "GITHUB_TOKEN)"
    )


@contextmanager
def github_token(config: GitHubConfig) -> Iterator[str]:
    """Hold a GitHub token for the duration of the block.

    When config.revoke_token is set a configured token is revoked on the
    way out, however the block ends. A GITHUB_TOKEN picked up from the
    environment belongs to the caller and is never revoked. A failed
    revocation is logged rather than raised so it cannot hide the error
    that ended the block.
    """
    token = resolve_token(config)
    owned = (
        config.token is not None
        and config.token.get_secret_value() == token
    )
    logger.debug("GitHub token acquired", owner=config.owner, owned=owned)
    try:
        yield token
    finally:
        if config.revoke_token and owned:
            try:
                with GitHubClient(
                    token, config.api_url, timeout=config.timeout
                ) as client:
                    client.revoke_token()
                logger.debug("GitHub token revoked")
            except GitHubError as e:
                logger.warn(
                    "Unable to revoke GitHub token: {error}", error=str(e)
                )

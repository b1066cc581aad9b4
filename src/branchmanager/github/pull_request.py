"""Load a pull request from GitHub into a ChangeRequest."""

from __future__ import annotations

from branchmanager.core.config import Config
from branchmanager.core.log import logger
from branchmanager.decision.request import ChangeRequest
from branchmanager.github.client import GitHubClient
from branchmanager.github.validation import validate_pull_request


def target_branches(
    base_ref: str, labels: list[str], backport_prefix: str
) -> list[str]:
    """The base branch followed by every backport label's branch.

    Duplicates are dropped; the first occurrence keeps its place.
    """
    branches = [base_ref]
    if backport_prefix:
        branches += [
            label[len(backport_prefix):].strip()
            for label in labels
            if label.startswith(backport_prefix)
        ]
    return list(dict.fromkeys(b for b in branches if b))


def load_pull_request(
    client: GitHubClient, config: Config, number: int
) -> ChangeRequest:
    """Fetch pull request `number`, validate it and compute its targets."""
    owner, repo = config.github.owner, config.github.repo

    with logger.span("Loading pull request", repo=f"{owner}/{repo}", pr=number):
        data = client.get_pull_request(owner, repo, number)
        head_sha = data["head"]["sha"]
        base_ref = data["base"]["ref"]
        labels = [label["name"] for label in data.get("labels", [])]
        combined_status = client.get_combined_status(owner, repo, head_sha)

        request = ChangeRequest(
            number=number,
            head_sha=head_sha,
            base_ref=base_ref,
            target_branches=target_branches(
                base_ref, labels, config.validation.backport_label_prefix
            ),
            validation_failures=validate_pull_request(
                data,
                combined_status,
                config.validation,
                config.github.status_context,
            ),
        )

    logger.info(
        f"Loaded pull request #{number}",
        head_sha=head_sha,
        targets=request.target_branches,
        failures=len(request.validation_failures),
    )
    return request

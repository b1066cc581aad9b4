"""Validation pass run over a pull request before the merge check.

Each rule returns the failures it found. Fatal failures hold the
mergeability check back; force-ignorable ones are only reported.
"""

from __future__ import annotations

from branchmanager.core.config import ValidationConfig
from branchmanager.decision.failures import ValidationFailure

_FAILING_STATES = {"failure", "error"}


def check_open(pull_request: dict) -> list[ValidationFailure]:
    if pull_request.get("merged"):
        return [ValidationFailure(
            message="Pull request is already merged",
            can_be_force_ignored=False,
        )]
    if pull_request.get("state") != "open":
        return [ValidationFailure(
            message="Pull request is closed", can_be_force_ignored=False
        )]
    return []


def check_target_label(
    labels: list[str], target_labels: list[str]
) -> list[ValidationFailure]:
    """Require exactly one target label when target labels are in use."""
    if not target_labels:
        return []
    found = [label for label in labels if label in target_labels]
    if not found:
        return [ValidationFailure(
            message="Pull request is missing a target label",
            can_be_force_ignored=False,
        )]
    if len(found) > 1:
        return [ValidationFailure(
            message=(
                f"Pull request has multiple target labels: "
                f"{', '.join(found)}"
            ),
            can_be_force_ignored=False,
        )]
    return []


def check_ci_status(
    combined_status: dict, own_context: str, failing_fatal: bool = False
) -> list[ValidationFailure]:
    """Report failing or pending commit statuses of other checks.

    The status this tool publishes itself is skipped, otherwise a
    previous pending result would keep the next run pending forever.
    """
    states = [
        status.get("state")
        for status in combined_status.get("statuses", [])
        if status.get("context") != own_context
    ]
    if any(state in _FAILING_STATES for state in states):
        return [ValidationFailure(
            message="Pull request has failing status(es)",
            can_be_force_ignored=not failing_fatal,
        )]
    if "pending" in states:
        return [ValidationFailure(
            message="Pull request has pending status(es)",
            can_be_force_ignored=True,
        )]
    return []


def check_title_length(
    title: str, max_length: int | None
) -> list[ValidationFailure]:
    if not max_length or len(title) <= max_length:
        return []
    return [ValidationFailure(
        message=(
            f"Pull request title is too long "
            f"({len(title)} > {max_length} characters)"
        ),
        can_be_force_ignored=True,
    )]


def validate_pull_request(
    pull_request: dict,
    combined_status: dict,
    config: ValidationConfig,
    own_context: str,
) -> list[ValidationFailure]:
    """Run every rule and collect the failures, in rule order."""
    labels = [label["name"] for label in pull_request.get("labels", [])]
    return [
        *check_open(pull_request),
        *check_target_label(labels, config.target_labels),
        *check_ci_status(
            combined_status, own_context, config.failing_ci_fatal
        ),
        *check_title_length(
            pull_request.get("title", ""), config.max_title_length
        ),
    ]

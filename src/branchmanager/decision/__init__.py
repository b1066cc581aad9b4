"""Merge-readiness decision engine."""

from branchmanager.decision.checker import MergeabilityChecker
from branchmanager.decision.failures import ValidationFailure, classify
from branchmanager.decision.outcome import Clean, Conflict, Error, MergeOutcome
from branchmanager.decision.request import ChangeRequest
from branchmanager.decision.status import (
    ReportableStatus,
    StatusResolver,
    StatusState,
    describe,
    pending,
)

__all__ = [
    "ChangeRequest",
    "Clean",
    "Conflict",
    "Error",
    "MergeOutcome",
    "MergeabilityChecker",
    "ReportableStatus",
    "StatusResolver",
    "StatusState",
    "ValidationFailure",
    "classify",
    "describe",
    "pending",
]

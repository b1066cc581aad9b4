"""Ask a merge strategy whether a change merges everywhere."""

from branchmanager.core.log import logger
from branchmanager.decision.outcome import Clean, Conflict, Error, MergeOutcome
from branchmanager.decision.request import ChangeRequest
from branchmanager.strategy.base import MergeStrategy
from branchmanager.strategy.errors import MergeConflictsError


class MergeabilityChecker:
    """Fold a strategy's prepare/check run into a MergeOutcome.

    Nothing raised by the strategy escapes: conflicts naming branches
    become Conflict, anything else becomes Error. A single attempt is
    final for the run.
    """

    def __init__(self, strategy: MergeStrategy):
        self.strategy = strategy

    def check(self, request: ChangeRequest) -> MergeOutcome:
        if not request.target_branches:
            logger.error(
                "No target branches to check", pr=request.number
            )
            return Error(detail="Pull request has no target branches")

        try:
            with logger.span(
                "Checking mergeability",
                pr=request.number,
                targets=request.target_branches,
            ):
                self.strategy.prepare(request)
                self.strategy.check(request)
        except MergeConflictsError as e:
            failed = _in_declared_order(
                e.failed_branches, request.target_branches
            )
            if not failed:
                logger.error("Merge conflict reported without branches")
                return Error(detail="Merge conflicts on unknown branches")
            logger.info("Merge conflicts found", branches=failed)
            return Conflict(failed_branches=failed)
        except Exception as e:
            logger.exception(
                "Mergeability check failed: {error}", error=str(e)
            )
            return Error(detail=f"{type(e).__name__}: {e}")

        logger.info("Merges cleanly", branches=request.target_branches)
        return Clean()


def _in_declared_order(failed: list[str], declared: list[str]) -> list[str]:
    """Order failed branches as the pull request declares them.

    Branches the strategy reports that were not declared go last, in the
    order reported.
    """
    ordered = [branch for branch in declared if branch in failed]
    extra = [branch for branch in failed if branch not in declared]
    return ordered + list(dict.fromkeys(extra))

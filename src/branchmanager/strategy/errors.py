"""Errors raised by merge strategies."""


class MergeStrategyError(Exception):
    """A strategy could not stage or check the change."""


class MergeConflictsError(MergeStrategyError):
    """The change does not apply cleanly to some target branches."""

    def __init__(self, failed_branches: list[str]):
        self.failed_branches = list(failed_branches)
        super().__init__(
            f"Merge conflicts with: {', '.join(self.failed_branches)}"
        )

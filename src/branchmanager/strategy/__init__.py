"""Merge strategy implementations."""

from pathlib import Path

from branchmanager.core.runner import Runner
from branchmanager.strategy.autosquash import AutosquashMergeStrategy
from branchmanager.strategy.base import MergeStrategy
from branchmanager.strategy.errors import (
    MergeConflictsError,
    MergeStrategyError,
)
from branchmanager.strategy.git import GitMergeStrategy
from branchmanager.strategy.merge_commit import MergeCommitStrategy

STRATEGIES = {
    AutosquashMergeStrategy.name: AutosquashMergeStrategy,
    MergeCommitStrategy.name: MergeCommitStrategy,
}


def create_strategy(
    name: str, runner: Runner, workdir: Path, config
) -> MergeStrategy:
    """Build the configured strategy for a clone at workdir.

    Args:
        name: Strategy name (a key of STRATEGIES)
        runner: Runner executing git commands
        workdir: Clone of the repository
        config: Config providing git command templates and settings

    Raises:
        ValueError: If no strategy has that name
    """
    try:
        strategy_cls = STRATEGIES[name]
    except KeyError:
        available = ", ".join(sorted(STRATEGIES))
        raise ValueError(
            f"Unknown merge strategy '{name}'. Available: {available}"
        ) from None
    return strategy_cls(
        runner,
        workdir,
        config.commands.get("git", {}),
        main_branch=config.git.main_branch,
        timeout=config.git.timeout,
    )


__all__ = [
    "AutosquashMergeStrategy",
    "GitMergeStrategy",
    "MergeCommitStrategy",
    "MergeConflictsError",
    "MergeStrategy",
    "MergeStrategyError",
    "STRATEGIES",
    "create_strategy",
]

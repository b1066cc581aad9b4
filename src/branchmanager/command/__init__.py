"""CLI command modules for branchmanager."""

from branchmanager.command.check import CheckCommand

__all__ = ["CheckCommand"]

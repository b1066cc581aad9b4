#!/usr/bin/env python3
"""Branch manager CLI - report whether a pull request merges cleanly."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from branchmanager.command.check import CheckCommand
from branchmanager.core.config import State
from branchmanager.core.log import logger


class CliState(State):
    """Check that a pull request merges cleanly into every branch it
    targets and publish the answer as a commit status.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.github.owner angular)
    2. Environment variables
       (BRANCHMANAGER_CONFIG__GITHUB__REPO=components)
    3. .env file for secrets
    4. --include files, then branchmanager.yaml, then the user and
       package defaults
    """

    check: CliSubCommand[CheckCommand]

    def cli_cmd(self):
        """Run the selected subcommand, or show help if none given.

        Anything the run raises marks the run itself as failed (exit code
        1); it is never reported as a commit status.
        """
        subcommand = get_subcommand(self, is_required=False)
        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        with logger:
            try:
                exit_code = asyncio.run(subcommand.run_workflow(self))
            except Exception as e:
                logger.exception("Branch manager failed: {error}", error=str(e))
                exit_code = 1
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()

"""Command execution on top of invoke."""

import shlex
from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from branchmanager.core.log import logger


def render(template: str, **values) -> str:
    """Fill a command template, shell-quoting every value.

    List values expand to one quoted word per item.
    """
    quoted = {}
    for key, value in values.items():
        if isinstance(value, (list, tuple)):
            quoted[key] = " ".join(shlex.quote(str(v)) for v in value)
        else:
            quoted[key] = shlex.quote(str(value))
    return template.format(**quoted)


class Runner(Context):
    """invoke.Context with a single execute() entry point.

    Output is always captured; callers decide whether a non-zero exit is
    an error (check=True raises invoke.UnexpectedExit).
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
        log_level: str | None = "trace",
        redact: str | None = None,
    ) -> Result:
        """Run a command and return its invoke.Result.

        Args:
            command: Shell command line
            cwd: Working directory for the command
            timeout: Seconds before the command is killed; a timed out
                command reports exit code -1
            check: Raise invoke.UnexpectedExit on non-zero exit
            env: Extra environment variables (merged into os.environ)
            log_level: Level for echoing output lines, or None for none
            redact: Secret to mask wherever the command is logged
        """
        shown = command.replace(redact, "***") if redact else command
        logger.debug("Running command", command=shown, cwd=str(cwd or ""))

        kwargs = {"hide": True, "warn": not check, "in_stream": False}
        if timeout:
            kwargs["timeout"] = timeout
        if env:
            kwargs["env"] = env

        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            logger.warn("Command timed out", command=shown, timeout=timeout)
            result = e.result
            result.exited = -1

        if log_level:
            for line in (result.stdout + result.stderr).splitlines():
                if redact:
                    line = line.replace(redact, "***")
                logger.log(log_level, "{line}", line=line.rstrip())
        return result

"""
Shell command adapter: run node, yarn and git and capture their output.

Commands are split with ``shlex`` and run without a shell, so quoted
arguments such as ``git commit -am 'Initial commit'`` arrive intact.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from rsc_quickstart.adapters.base import Command, CommandAdapter, command_to_args, command_to_str
from rsc_quickstart.core.models.command import CommandResult

logger = logging.getLogger(__name__)


class ShellCommandAdapter(CommandAdapter):
    """Execute commands as subprocesses and capture output.

    Args:
        timeout: Seconds before a command is abandoned (default: no limit,
            ``yarn install`` can take a long time).
        verbose: Log each command's output at INFO instead of DEBUG.
    """

    def __init__(self, *, timeout: float | None = None, verbose: bool = False) -> None:
        self._timeout = timeout
        self._log_level = logging.INFO if verbose else logging.DEBUG

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def execute(self, command: Command, cwd: Path | str | None = None) -> CommandResult:
        args = command_to_args(command)
        display = command_to_str(command)
        cwd_str = str(cwd) if cwd is not None else None

        if not args:
            return CommandResult.failure(command=display, cwd=cwd_str, error="No command provided")

        logger.debug("Executing: %s (cwd=%s)", display, cwd_str)
        start = time.monotonic()

        try:
            result = subprocess.run(
                args,
                cwd=cwd_str,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult.failure(
                command=display,
                cwd=cwd_str,
                error=f"Command timed out after {self._timeout}s",
                metadata={"timeout": self._timeout},
            )
        except OSError as e:
            return CommandResult.failure(
                command=display,
                cwd=cwd_str,
                error=f"Failed to execute command: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.returncode == 0:
            logger.log(self._log_level, "`%s` output:\n%s", args[0], result.stdout)
            return CommandResult.success(
                command=display,
                cwd=cwd_str,
                stdout=result.stdout,
                stderr=result.stderr,
                duration_ms=elapsed_ms,
            )

        return CommandResult.failure(
            command=display,
            cwd=cwd_str,
            error=f"Command exited with code {result.returncode}",
            return_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=elapsed_ms,
        )

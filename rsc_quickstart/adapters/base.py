"""
Adapter base: the contract between the use cases and external commands.

Use cases only talk to external tools (node, yarn, git) through this
protocol, never through ``subprocess`` directly.  Tests swap in
``MockCommandAdapter``.
"""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from rsc_quickstart.core.errors import CommandFailedError
from rsc_quickstart.core.models.command import CommandResult

Command = str | Sequence[str]


def command_to_args(command: Command) -> list[str]:
    """Split a command line into argv.  Sequences pass through unchanged."""
    if isinstance(command, str):
        return shlex.split(command)
    return [str(part) for part in command]


def command_to_str(command: Command) -> str:
    if isinstance(command, str):
        return command
    return shlex.join(str(part) for part in command)


class CommandAdapter(ABC):
    """Abstract base class for command runners.

    ``execute`` NEVER raises for a failing command; the failure is
    captured in the CommandResult.  ``run`` is the strict variant used
    by the bootstrap flow: any failure becomes a ``CommandFailedError``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if commands can be run at all. Should never raise."""

    @abstractmethod
    def execute(self, command: Command, cwd: Path | str | None = None) -> CommandResult:
        """Run ``command`` to completion and return its result."""

    def run(self, command: Command, cwd: Path | str | None = None) -> str:
        """Run ``command`` and return its stdout.

        Raises:
            CommandFailedError: The command couldn't start or exited non-zero.
        """
        result = self.execute(command, cwd=cwd)
        if result.failed:
            raise CommandFailedError(
                result.command,
                result.return_code,
                result.stderr or result.error or "",
            )
        return result.stdout

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

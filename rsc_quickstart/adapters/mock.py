"""
Mock command adapter: test double for everything that shells out.

Returns success with empty output by default.  Responses can be set
per command line, either exactly or by program name.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rsc_quickstart.adapters.base import Command, CommandAdapter, command_to_args, command_to_str
from rsc_quickstart.core.models.command import CommandResult


@dataclass(frozen=True)
class MockCall:
    """One recorded invocation."""

    command: str
    cwd: str | None


class MockCommandAdapter(CommandAdapter):
    """Universal mock adapter for testing.

    Lookup order for a command: exact command line, then program name
    (first argv element), then the default success result.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, CommandResult] = {}
        self._call_log: list[MockCall] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[MockCall]:
        """All invocations this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        return [call.command for call in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_output(self, command: str, stdout: str) -> None:
        """Make ``command`` succeed with ``stdout``."""
        self._responses[command] = CommandResult.success(command=command, stdout=stdout)

    def set_failure(
        self,
        command: str,
        return_code: int = 1,
        stderr: str = "Mock failure",
    ) -> None:
        """Make ``command`` exit with ``return_code``."""
        self._responses[command] = CommandResult.failure(
            command=command,
            error=f"Command exited with code {return_code}",
            return_code=return_code,
            stderr=stderr,
        )

    def execute(self, command: Command, cwd: Path | str | None = None) -> CommandResult:
        display = command_to_str(command)
        cwd_str = str(cwd) if cwd is not None else None
        self._call_log.append(MockCall(command=display, cwd=cwd_str))

        args = command_to_args(command)
        program = args[0] if args else ""
        response = self._responses.get(display)
        if response is None:
            response = self._responses.get(program)
        if response is not None:
            return response.model_copy(update={"command": display, "cwd": cwd_str})

        return CommandResult.success(
            command=display,
            cwd=cwd_str,
            stdout=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()

"""
Command result model: the outcome of one shelled-out command.

Adapters return a ``CommandResult`` from ``execute`` instead of raising,
so callers decide whether a non-zero exit is fatal.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Captured outcome of a command run to completion."""

    command: str
    cwd: str | None = None
    status: Literal["ok", "failed"] = "ok"

    return_code: int | None = None   # None when the process never started
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed to start or exited non-zero."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        command: str,
        stdout: str = "",
        **kwargs: Any,
    ) -> CommandResult:
        """Create a success result."""
        return cls(
            command=command,
            status="ok",
            return_code=kwargs.pop("return_code", 0),
            stdout=stdout,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        command: str,
        error: str,
        **kwargs: Any,
    ) -> CommandResult:
        """Create a failure result."""
        return cls(
            command=command,
            status="failed",
            error=error,
            **kwargs,
        )

"""
Error hierarchy: every fatal condition the quickstart can hit.

Each error carries a user-facing message plus optional hint lines that
the CLI prints underneath it.  All of them are terminal: the CLI turns
any ``QuickstartError`` into a diagnostic on stderr and ``exit_code``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class QuickstartError(Exception):
    """Base class for all fatal quickstart errors."""

    exit_code = 1

    def __init__(self, message: str, *, hints: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.hints = tuple(hints)

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "kind": type(self).__name__,
            "hints": list(self.hints),
        }


# ── Toolchain ───────────────────────────────────────────────────


class ExecutableNotFoundError(QuickstartError):
    """A required executable is not on the search path."""


class AmbiguousInstallationError(QuickstartError):
    """The executable exists but was not installed by the managed installer."""


class MultipleInstallationsError(QuickstartError):
    """Several unmanaged copies of the executable are on the search path."""


class CanonicalizationError(QuickstartError):
    """A candidate path could not be resolved to a real path."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Failed to canonicalize {path}: {reason}")
        self.path = Path(path)


class VersionTooOldError(QuickstartError):
    """A tool reported a version below the required major version."""


# ── Parsing ─────────────────────────────────────────────────────


class ParseError(QuickstartError):
    """Malformed input: a version string or a manifest document."""


class VersionParseError(ParseError):
    """A version string is not ``[v]MAJOR.MINOR.PATCH[-pre][+build]``."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Not a valid version string: {text!r}")
        self.text = text


class ManifestParseError(ParseError):
    """A manifest is not valid JSON or has the wrong shape."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to parse {path}: {reason}")
        self.path = path


# ── Manifest I/O ────────────────────────────────────────────────


class ManifestReadError(QuickstartError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path


class ManifestWriteError(QuickstartError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path


# ── Collaborators ───────────────────────────────────────────────


class CommandFailedError(QuickstartError):
    """A shelled-out command could not start or exited non-zero."""

    def __init__(
        self,
        command: str,
        return_code: int | None,
        stderr: str = "",
    ) -> None:
        program = command.split()[0] if command.strip() else command
        if return_code is None:
            message = f"`{program}` could not be executed"
        else:
            message = f"`{program}` exited with code {return_code}"
        hints = [line for line in stderr.strip().splitlines()[-10:] if line.strip()]
        super().__init__(message, hints=hints)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr


class DownloadError(QuickstartError):
    """The template archive could not be downloaded or unpacked."""


class TemplateError(QuickstartError):
    """The unpacked archive does not contain the expected template."""


class RegistryError(QuickstartError):
    """The package registry did not return a usable dist-tag."""


class ConfigError(QuickstartError):
    """Raised when a settings file is missing or invalid."""

"""
Version oracle: query a tool's version and check it against a major floor.

Parsing and comparison are pure.  Obtaining the version string goes
through a ``CommandAdapter`` (``<tool> --version``, trimmed stdout).
The oracle only answers; deciding to abort is the caller's job.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from rsc_quickstart.adapters.base import CommandAdapter
from rsc_quickstart.core.errors import VersionParseError
from rsc_quickstart.core.models.toolchain import Version, VersionConstraint

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)


def parse_version(text: str) -> Version:
    """Parse ``[v]MAJOR.MINOR.PATCH[-pre][+build]``.

    Raises:
        VersionParseError: If ``text`` isn't a version string.
    """
    match = _VERSION_RE.match(text.strip())
    if not match:
        raise VersionParseError(text)
    return Version(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=match.group("pre") or "",
    )


def check_minimum(actual_version: str, minimum_major: int) -> bool:
    """True if ``actual_version``'s major is at least ``minimum_major``.

    Minor and patch are not constrained.
    """
    return parse_version(actual_version).major >= minimum_major


class VersionOracle:
    """Reads tool versions through a command adapter."""

    def __init__(self, runner: CommandAdapter, *, verbose: bool = False) -> None:
        self._runner = runner
        self._log_level = logging.INFO if verbose else logging.DEBUG

    def query(self, tool: str, cwd: Path | str | None = None) -> str:
        """Run ``<tool> --version`` and return its trimmed output."""
        version = self._runner.run([tool, "--version"], cwd=cwd).strip()
        logger.log(self._log_level, "%s version: %s", tool.capitalize(), version)
        return version

    def satisfies(
        self,
        constraint: VersionConstraint,
        cwd: Path | str | None = None,
    ) -> tuple[bool, str]:
        """Query ``constraint.tool`` and check it.

        Returns:
            ``(ok, reported_version)``.
        """
        reported = self.query(constraint.tool, cwd=cwd)
        return check_minimum(reported, constraint.minimum_major), reported

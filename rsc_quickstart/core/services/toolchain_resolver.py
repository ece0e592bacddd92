"""
Toolchain resolver: make sure exactly one managed copy of a tool is active.

The package manager must come from corepack.  A hand-installed copy
(Homebrew, ``npm i -g``) either replaces the managed one or shadows it
on PATH, and both cases have to be caught before ``yarn install`` runs.

The search path is an explicit input so tests can point the resolver
at a synthetic directory layout instead of the machine's real PATH.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from rsc_quickstart.core.errors import (
    AmbiguousInstallationError,
    CanonicalizationError,
    ExecutableNotFoundError,
    MultipleInstallationsError,
)
from rsc_quickstart.core.models.toolchain import ExecutableCandidate, Provenance

logger = logging.getLogger(__name__)

DEFAULT_MANAGED_SEGMENT = "corepack"

Classifier = Callable[[Path, str], Provenance]


def classify_provenance(path: Path, managed_segment: str = DEFAULT_MANAGED_SEGMENT) -> Provenance:
    """Classify a canonical path as managed or unmanaged.

    Managed means the path has a directory segment exactly equal to
    ``managed_segment`` (case-sensitive), in either separator style.
    """
    text = str(path)
    if f"/{managed_segment}/" in text or f"\\{managed_segment}\\" in text:
        return "managed"
    return "unmanaged"


def split_search_path(value: str | None = None) -> list[Path]:
    """Split a PATH-style string (default: ``$PATH``) into directories."""
    if value is None:
        value = os.environ.get("PATH", os.defpath)
    return [Path(entry) for entry in value.split(os.pathsep) if entry]


def canonicalize(path: Path) -> Path:
    """Resolve symlinks to an absolute real path.

    Raises:
        CanonicalizationError: The path (or a link target) doesn't exist
            or loops.
    """
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise CanonicalizationError(path, str(e)) from e


class ToolchainResolver:
    """Find and vet the installation of one named executable.

    Args:
        name: Executable name, e.g. ``"yarn"``.
        search_path: Directories to search, in order.  ``None`` uses ``$PATH``.
        managed_segment: Path segment that marks a managed installation.
        classifier: Provenance heuristic, swappable for testing.
        verbose: Log discovery details at INFO instead of DEBUG.
    """

    def __init__(
        self,
        name: str,
        *,
        search_path: Sequence[Path | str] | None = None,
        managed_segment: str = DEFAULT_MANAGED_SEGMENT,
        classifier: Classifier = classify_provenance,
        verbose: bool = False,
    ) -> None:
        self.name = name
        self._search_path = (
            split_search_path() if search_path is None else [Path(p) for p in search_path]
        )
        self._managed_segment = managed_segment
        self._classifier = classifier
        self._log_level = logging.INFO if verbose else logging.DEBUG

    @property
    def search_path(self) -> list[Path]:
        return list(self._search_path)

    # ── Discovery ───────────────────────────────────────────────

    def find_first(self) -> Path | None:
        """The executable the shell would run, or None."""
        joined = os.pathsep.join(str(d) for d in self._search_path)
        hit = shutil.which(self.name, path=joined)
        return Path(hit) if hit else None

    def find_all(self) -> list[Path]:
        """Every executable with this name on the search path, in path order."""
        found: list[Path] = []
        for directory in self._search_path:
            hit = shutil.which(self.name, path=str(directory))
            if hit:
                found.append(Path(hit))
        return found

    def candidate(self, path: Path) -> ExecutableCandidate:
        """Canonicalize and classify one discovered path."""
        real = canonicalize(path)
        return ExecutableCandidate(
            path=real,
            provenance=self._classifier(real, self._managed_segment),
        )

    def candidates(self) -> list[ExecutableCandidate]:
        """All installations, canonicalized, with duplicate real paths merged."""
        seen: set[Path] = set()
        result: list[ExecutableCandidate] = []
        for path in self.find_all():
            cand = self.candidate(path)
            logger.log(self._log_level, "Found %s: %s", self.name, cand.path)
            # PATH entries that are symlinks to each other (/bin and /usr/bin on
            # merged-usr systems) count as one installation, not several.
            if cand.path in seen:
                continue
            seen.add(cand.path)
            result.append(cand)
        return result

    # ── Resolution ──────────────────────────────────────────────

    def resolve(self) -> ExecutableCandidate:
        """Return the authoritative, managed installation.

        Raises:
            ExecutableNotFoundError: Nothing named ``name`` on the path.
            AmbiguousInstallationError: The only copy is unmanaged, or an
                unmanaged copy shadows a managed one.
            MultipleInstallationsError: Several copies, none managed.
            CanonicalizationError: A candidate path couldn't be resolved.
        """
        first = self.find_first()
        if first is None:
            raise ExecutableNotFoundError(
                f"Could not find `{self.name}`",
                hints=[
                    f"Please enable {self.name} by running `{self._managed_segment} enable`",
                    f"and then upgrade by running "
                    f"`{self._managed_segment} install --global {self.name}@latest`",
                ],
            )

        logger.log(self._log_level, "%s path: %s", self.name.capitalize(), first)
        primary = self.candidate(first)
        logger.log(self._log_level, "%s canonical path: %s", self.name.capitalize(), primary.path)

        if primary.is_managed:
            return primary

        everything = self.candidates()
        logger.log(
            self._log_level,
            "Number of %s found in PATH: %d",
            self.name,
            len(everything),
        )

        if any(c.is_managed for c in everything):
            raise AmbiguousInstallationError(
                f"You have more than one active {self.name} installation",
                hints=[
                    "Perhaps you've manually installed it using Homebrew or npm",
                    f"Please completely uninstall {self.name} and then enable it "
                    f"using {self._managed_segment}.",
                    f"The only correct way to enable {self.name} is by running",
                    f"`{self._managed_segment} enable`",
                    f"({self.name} is already shipped with Node, you just need to enable it)",
                ],
            )

        if len(everything) > 1:
            raise MultipleInstallationsError(
                f"Multiple {self.name} binaries found. This could be a problem. "
                f"Make sure the first `{self.name}` in your PATH is the one you want to use.",
                hints=[str(c.path) for c in everything],
            )

        raise AmbiguousInstallationError(
            f"`{self.name}` at {primary.path} was not installed by {self._managed_segment}",
            hints=[
                f"Please uninstall it and enable {self.name} by running "
                f"`{self._managed_segment} enable`",
            ],
        )

"""
Manifest rewriter: pin framework dependencies to one version.

Walks a project tree, loads every ``package.json``, points each
``dependencies`` / ``devDependencies`` entry whose name starts with the
target prefix at the replacement version, and writes the file back.

Output is ``json.dumps(indent=2)`` with key order as read plus a
trailing newline, so re-running with the same inputs is byte-for-byte
idempotent.  Writes are not atomic: the tree was just unpacked from a
pristine archive and can be fetched again.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rsc_quickstart.core.errors import (
    ManifestParseError,
    ManifestReadError,
    ManifestWriteError,
    QuickstartError,
)
from rsc_quickstart.core.models.toolchain import RewriteTarget

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")
DEFAULT_IGNORE_DIRS = ("node_modules", ".git")


@dataclass
class RewriteReport:
    """Outcome of one rewrite pass over a tree."""

    manifests_found: int = 0
    manifests_modified: int = 0
    entries_rewritten: int = 0
    paths: list[Path] = field(default_factory=list)
    failures: list[QuickstartError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "manifests_found": self.manifests_found,
            "manifests_modified": self.manifests_modified,
            "entries_rewritten": self.entries_rewritten,
            "paths": [str(p) for p in self.paths],
            "failures": [f.message for f in self.failures],
        }


def rewrite_dependencies(document: dict, target: RewriteTarget, source: Path) -> int:
    """Rewrite matching entries of a parsed manifest in place.

    Returns the number of entries rewritten.

    Raises:
        ManifestParseError: A dependency section exists but isn't an object.
    """
    count = 0
    for section in DEPENDENCY_SECTIONS:
        if section not in document:
            continue
        entries = document[section]
        if not isinstance(entries, dict):
            raise ManifestParseError(
                source,
                f"'{section}' must be an object, got {_json_type(entries)}",
            )
        for name in entries:
            if target.matches(name):
                entries[name] = target.replacement_version
                count += 1
    return count


def _json_type(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def dump_manifest(document: dict) -> str:
    """Serialize a manifest the way it's written to disk."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def _raise_walk_error(err: OSError) -> None:
    raise ManifestReadError(Path(err.filename or "."), err.strerror or str(err)) from err


class ManifestRewriter:
    """Rewrite every manifest under a root directory.

    Args:
        target: Name prefix and replacement version.
        manifest_name: File name to look for at any depth.
        ignore_dirs: Directory names never descended into.
        continue_on_error: Record per-file failures and keep going instead
            of aborting on the first one.
        verbose: Log each manifest at INFO instead of DEBUG.
    """

    def __init__(
        self,
        target: RewriteTarget,
        *,
        manifest_name: str = MANIFEST_NAME,
        ignore_dirs: Sequence[str] = DEFAULT_IGNORE_DIRS,
        continue_on_error: bool = False,
        verbose: bool = False,
    ) -> None:
        self.target = target
        self.manifest_name = manifest_name
        self._ignore_dirs = frozenset(ignore_dirs)
        self._continue_on_error = continue_on_error
        self._log_level = logging.INFO if verbose else logging.DEBUG

    def discover(self, root: Path) -> list[Path]:
        """All manifest files under ``root`` (inclusive), in sorted order.

        Raises:
            ManifestReadError: ``root`` or a directory below it can't be listed.
        """
        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            dirnames[:] = sorted(d for d in dirnames if d not in self._ignore_dirs)
            if self.manifest_name in filenames:
                candidate = Path(dirpath) / self.manifest_name
                if candidate.is_file():
                    found.append(candidate)
        return sorted(found)

    def rewrite_file(self, path: Path) -> int:
        """Rewrite one manifest. Returns the number of entries rewritten."""
        logger.log(
            self._log_level,
            "Updating %s to use version %s",
            path,
            self.target.replacement_version,
        )

        try:
            contents = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestReadError(path, str(e)) from e

        try:
            document = json.loads(contents)
        except json.JSONDecodeError as e:
            raise ManifestParseError(path, str(e)) from e

        if not isinstance(document, dict):
            raise ManifestParseError(path, f"expected an object, got {_json_type(document)}")

        count = rewrite_dependencies(document, self.target, path)

        try:
            path.write_text(dump_manifest(document), encoding="utf-8")
        except OSError as e:
            raise ManifestWriteError(path, str(e)) from e

        return count

    def rewrite_all(self, root: Path) -> RewriteReport:
        """Rewrite every manifest under ``root``.

        Raises:
            QuickstartError: The first failure, unless ``continue_on_error``.
        """
        report = RewriteReport()
        for path in self.discover(Path(root)):
            report.manifests_found += 1
            try:
                count = self.rewrite_file(path)
            except QuickstartError as e:
                if not self._continue_on_error:
                    raise
                logger.warning("Skipping %s: %s", path, e.message)
                report.failures.append(e)
                continue
            report.paths.append(path)
            report.entries_rewritten += count
            if count:
                report.manifests_modified += 1

        logger.log(
            self._log_level,
            "Rewrote %d entries in %d of %d manifests",
            report.entries_rewritten,
            report.manifests_modified,
            report.manifests_found,
        )
        return report


def rewrite_all(
    root_dir: Path,
    name_prefix: str,
    replacement_version: str,
    **kwargs,
) -> int:
    """Rewrite all manifests under ``root_dir``; return how many were modified.

    A manifest counts as modified when at least one of its entries
    matched ``name_prefix``.  Keyword arguments go to ``ManifestRewriter``.
    """
    target = RewriteTarget(name_prefix=name_prefix, replacement_version=replacement_version)
    return ManifestRewriter(target, **kwargs).rewrite_all(Path(root_dir)).manifests_modified

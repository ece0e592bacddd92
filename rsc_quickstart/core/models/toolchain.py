"""
Toolchain models: executable candidates, version constraints, rewrite targets.

These are small immutable values passed between the services and the
bootstrap use case.  None of them are persisted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

Provenance = Literal["managed", "unmanaged"]


class ExecutableCandidate(BaseModel):
    """A discovered executable, symlink-resolved and classified."""

    model_config = ConfigDict(frozen=True)

    path: Path
    provenance: Provenance

    @property
    def is_managed(self) -> bool:
        return self.provenance == "managed"


class VersionConstraint(BaseModel):
    """Minimum major version a tool must report.

    ``message`` is the remedy shown to the user when the floor isn't met.
    """

    model_config = ConfigDict(frozen=True)

    tool: str
    minimum_major: int = Field(ge=0)
    message: str = ""


class Version(NamedTuple):
    """A parsed ``MAJOR.MINOR.PATCH[-prerelease]`` version."""

    major: int
    minor: int
    patch: int
    prerelease: str = ""

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease else base


class RewriteTarget(BaseModel):
    """Which dependency entries to rewrite, and to what."""

    model_config = ConfigDict(frozen=True)

    name_prefix: str = Field(min_length=1)
    replacement_version: str = Field(min_length=1)

    def matches(self, name: str) -> bool:
        return name.startswith(self.name_prefix)

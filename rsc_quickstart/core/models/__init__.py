"""
Domain models for the quickstart.
"""

from rsc_quickstart.core.models.command import CommandResult
from rsc_quickstart.core.models.settings import QuickstartSettings
from rsc_quickstart.core.models.toolchain import (
    ExecutableCandidate,
    Provenance,
    RewriteTarget,
    Version,
    VersionConstraint,
)

__all__ = [
    "CommandResult",
    "ExecutableCandidate",
    "Provenance",
    "QuickstartSettings",
    "RewriteTarget",
    "Version",
    "VersionConstraint",
]

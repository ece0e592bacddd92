"""Adapters: bindings for the external commands the quickstart runs.

Public re-exports for convenient access.
"""

from rsc_quickstart.adapters.base import CommandAdapter
from rsc_quickstart.adapters.mock import MockCommandAdapter
from rsc_quickstart.adapters.shell.command import ShellCommandAdapter

__all__ = [
    "CommandAdapter",
    "MockCommandAdapter",
    "ShellCommandAdapter",
]

"""
Shared test fixtures and configuration.
"""

import json
import logging
import os
from pathlib import Path

import pytest


@pytest.fixture
def write_manifest():
    """Write a dict as a package.json (or any JSON file) and return its path."""

    def _write(path: Path, document, *, indent: int | None = 4) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = document if isinstance(document, str) else json.dumps(document, indent=indent)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_executable():
    """Create an executable file (or a symlink to one) for PATH tests."""

    def _make(path: Path, *, link_to: Path | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if link_to is not None:
            os.symlink(link_to, path)
            return path
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)

"""
Logging configuration for the CLI.

``setup_logging`` runs once, before any work starts.  Modules only ever
do ``logger = logging.getLogger(__name__)`` and inherit the root setup.

Console level precedence:
    --debug  >  --verbose  >  RSCQ_LOG_LEVEL  >  WARNING

A second, independent sink can be added with RSCQ_LOG_FILE (its level
comes from RSCQ_LOG_FILE_LEVEL, else the console level).
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

LEVEL_ENV_VAR = "RSCQ_LOG_LEVEL"
FILE_ENV_VAR = "RSCQ_LOG_FILE"
FILE_LEVEL_ENV_VAR = "RSCQ_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"

# Progress output is plain text down to INFO; DEBUG adds origin and time.
_CONSOLE_DEBUG = logging.Formatter(_DETAILED, datefmt="%H:%M:%S")
_CONSOLE_PLAIN = logging.Formatter("%(message)s")
_FILE = logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S")


def console_level(
    *,
    verbose: bool = False,
    debug: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from the CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    env = os.environ if env is None else env
    return env.get(LEVEL_ENV_VAR) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with a stderr handler and,
    optionally, a UTF-8 file handler.

    Args:
        level: Console level name.  Unknown names mean WARNING.
        log_file: Path of an extra log file.
        log_file_level: Level for the file; defaults to ``level``.
    """
    numeric = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric)
    console.setFormatter(_CONSOLE_DEBUG if numeric <= logging.DEBUG else _CONSOLE_PLAIN)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = numeric

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(_FILE)
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    logging.raiseExceptions = False


def setup_from_env(*, verbose: bool = False, debug: bool = False) -> None:
    """``setup_logging`` driven by the CLI flags and the RSCQ_* variables."""
    setup_logging(
        level=console_level(verbose=verbose, debug=debug),
        log_file=os.environ.get(FILE_ENV_VAR) or None,
        log_file_level=os.environ.get(FILE_LEVEL_ENV_VAR) or None,
    )


def _parse_level(level: str | None) -> int:
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else logging.WARNING

"""
Configuration loader: reads an optional settings YAML into QuickstartSettings.

Nothing here is required: with no file the built-in defaults are used.
A file is picked up from ``--config`` or the ``RSCQ_CONFIG`` env var,
validated against the Pydantic model, and returned typed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from rsc_quickstart.core.errors import ConfigError
from rsc_quickstart.core.models.settings import QuickstartSettings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RSCQ_CONFIG"


def resolve_config_path(path: Path | None = None) -> Path | None:
    """Pick the settings file: explicit path first, then ``RSCQ_CONFIG``."""
    if path is not None:
        return path
    env_value = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(env_value) if env_value else None


def load_settings(path: Path | None = None) -> QuickstartSettings:
    """Load and validate quickstart settings.

    Args:
        path: Explicit path to a settings YAML. If None, ``RSCQ_CONFIG``
            is consulted, and defaults are used when neither is set.

    Returns:
        Validated QuickstartSettings model.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    path = resolve_config_path(path)
    if path is None:
        logger.debug("No settings file, using defaults")
        return QuickstartSettings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = QuickstartSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings

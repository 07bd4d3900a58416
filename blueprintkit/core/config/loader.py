"""
Configuration loader — locates the project and reads ``.blueprints.yml``.

The project root is the nearest directory (walking up) that holds a
``package.json``.  The config file is optional; when absent every
setting takes its default.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from blueprintkit.core.models.config import ToolConfig

logger = logging.getLogger(__name__)

# Marker file for the project root
PACKAGE_MANIFEST = "package.json"

# Optional tool config, next to package.json
CONFIG_FILE = ".blueprints.yml"


class ConfigError(Exception):
    """Raised when project configuration is invalid or unreadable."""


def find_project_root(start_dir: Path | None = None) -> Path | None:
    """Search for package.json starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Directory containing package.json, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        if (current / PACKAGE_MANIFEST).is_file():
            return current
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None, *, project_root: Path | None = None) -> ToolConfig:
    """Load and validate ``.blueprints.yml``.

    Args:
        path: Explicit config path. If None, looks in ``project_root``.
        project_root: Where to look when ``path`` is not given.

    Returns:
        Validated ToolConfig (defaults when no file exists).

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        if project_root is None:
            return ToolConfig()
        path = project_root / CONFIG_FILE
        if not path.is_file():
            logger.debug("No %s in %s, using defaults", CONFIG_FILE, project_root)
            return ToolConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading tool config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ToolConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = ToolConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid blueprint configuration: {e}") from e

    logger.info("Loaded tool config from %s", path)
    return config


def read_package_json(directory: Path) -> dict[str, Any] | None:
    """Parse ``<directory>/package.json``; None if absent or unreadable."""
    manifest = directory / PACKAGE_MANIFEST
    if not manifest.is_file():
        return None
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Cannot parse %s: %s", manifest, e)
        return None
    if not isinstance(data, dict):
        logger.warning("%s is not a JSON object, ignoring", manifest)
        return None
    return data

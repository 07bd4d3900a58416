"""
Addon discovery — which packages contribute blueprints.

Order matters: blueprints found later take the bare invocation name on
a collision, so the list runs from least to most specific:

    1. blueprints bundled with this tool
    2. addon dependencies of the project (local only)
    3. the project itself (local only)
"""

from __future__ import annotations

import logging
from pathlib import Path

from blueprintkit.core.config.loader import read_package_json
from blueprintkit.core.models.addon import Addon
from blueprintkit.core.models.config import ToolConfig

logger = logging.getLogger(__name__)

TOOL_NAME = "blueprintkit"

BUILTIN_BLUEPRINTS_DIR = Path(__file__).resolve().parents[2] / "blueprints"


def builtin_addon() -> Addon:
    """The pseudo-addon for blueprints shipped inside this package."""
    return Addon(
        name=TOOL_NAME,
        dir=BUILTIN_BLUEPRINTS_DIR.parent,
        blueprint_dirs=[BUILTIN_BLUEPRINTS_DIR],
    )


def find_addons(
    is_local: bool,
    project_root: Path | None = None,
    config: ToolConfig | None = None,
) -> list[Addon]:
    """Return every addon that may supply blueprints.

    Args:
        is_local: Running inside a project (package.json found).
        project_root: The project directory (required when local).
        config: Tool config; defaults apply when omitted.

    Returns:
        Addons ordered from least to most specific.
    """
    config = config or ToolConfig()
    addons = [builtin_addon()]

    if not is_local or project_root is None:
        logger.debug("Not inside a project, using bundled blueprints only")
        return addons

    pkg = read_package_json(project_root) or {}
    addons.extend(_dependency_addons(project_root, pkg, config))

    project_dirs = [project_root / config.blueprints_dir]
    project_dirs.extend(project_root / d for d in config.extra_blueprint_dirs)
    addons.append(Addon(
        name=str(pkg.get("name") or project_root.name),
        dir=project_root,
        pkg=pkg,
        blueprint_dirs=project_dirs,
    ))

    logger.debug("Found %d addons: %s", len(addons), [a.name for a in addons])
    return addons


def _dependency_addons(
    project_root: Path,
    pkg: dict,
    config: ToolConfig,
) -> list[Addon]:
    """Dependencies whose package.json carries the addon keyword."""
    names: list[str] = []
    for section in ("dependencies", "devDependencies"):
        deps = pkg.get(section) or {}
        if isinstance(deps, dict):
            names.extend(n for n in deps if n not in names)

    deps_root = project_root / config.dependencies_dir
    found: list[Addon] = []
    for name in names:
        dep_dir = deps_root / name
        dep_pkg = read_package_json(dep_dir)
        if dep_pkg is None:
            logger.debug("Dependency %s not installed, skipping", name)
            continue
        addon = Addon(
            name=str(dep_pkg.get("name") or name),
            dir=dep_dir,
            pkg=dep_pkg,
            blueprint_dirs=[dep_dir / config.blueprints_dir],
        )
        if config.addon_keyword not in addon.keywords:
            continue
        found.append(addon)

    return found

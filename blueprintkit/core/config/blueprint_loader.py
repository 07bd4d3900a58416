"""
Blueprint loader — discovers blueprint directories and loads their classes.

Every addon may ship blueprints in ``<addon>/blueprints/``::

    blueprints/
        model/
            blueprint.py       # optional: a Blueprint subclass
            files/
                app/models/__name__.js
        action/
            files/...

Each blueprint is registered under its ``blueprint_name`` (or its
directory name).  When a later addon provides a blueprint with a name
already taken, the earlier one stays reachable as ``<addon>:<name>``.
"""

from __future__ import annotations

import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType

from blueprintkit.core.config.addons import find_addons
from blueprintkit.core.models.config import ToolConfig
from blueprintkit.core.services.blueprint import Blueprint

logger = logging.getLogger(__name__)

BLUEPRINT_MODULE = "blueprint.py"

_MODULE_PREFIX = "blueprintkit_blueprints"
_UNSAFE_IDENT = re.compile(r"[^0-9a-zA-Z_]+")


def find_blueprints(
    is_local: bool,
    project_root: Path | None = None,
    config: ToolConfig | None = None,
) -> dict[str, type[Blueprint]]:
    """Find all available blueprints, keyed by invocation name."""
    found: dict[str, type[Blueprint]] = {}
    logger.debug("Discovering available blueprints")
    for addon in find_addons(is_local, project_root, config):
        for directory in addon.blueprint_dirs:
            discover_blueprints_for_addon(found, addon.name, directory)
    logger.info("Discovered %d blueprints: %s", len(found), sorted(found))
    return found


def discover_blueprints_for_addon(
    found: dict[str, type[Blueprint]],
    addon_name: str,
    directory: Path,
) -> dict[str, type[Blueprint]]:
    """Load every blueprint under *directory* into *found*.

    Returns *found*, updated in place.
    """
    if not directory.is_dir():
        return found

    loaded: dict[str, type[Blueprint]] = {}
    for child in sorted(directory.iterdir()):
        if not child.is_dir() or child.name.startswith((".", "__")):
            continue
        blueprint_cls = load_blueprint(child, addon_name)
        if blueprint_cls is not None:
            loaded[blueprint_cls.invocation_name()] = blueprint_cls

    logger.debug(
        "Found %d blueprints for %s: [ %s ]",
        len(loaded), addon_name, ", ".join(loaded),
    )

    # Keep clobbered blueprints reachable under an addon-scoped name
    for name in loaded:
        if name in found:
            clobbered = found[name]
            found[f"{clobbered.addon_name}:{name}"] = clobbered

    found.update(loaded)
    return found


def load_blueprint(directory: Path, addon_name: str) -> type[Blueprint] | None:
    """Load the blueprint class for one directory.

    Without a ``blueprint.py`` the directory becomes a plain blueprint.

    Returns:
        A Blueprint subclass bound to *directory*, or None if loading fails.
    """
    module_path = directory / BLUEPRINT_MODULE
    base: type[Blueprint] = Blueprint

    if module_path.is_file():
        try:
            module = _import_module(module_path, addon_name)
        except Exception as e:
            logger.warning("Failed to load blueprint from %s: %s", module_path, e)
            logger.debug("Blueprint import traceback", exc_info=True)
            return None
        defined = _blueprint_class(module)
        if defined is None:
            logger.warning("%s defines no Blueprint subclass, skipping", module_path)
            return None
        base = defined

    # Subclass so discovery metadata never leaks onto a shared class
    bound = type(base.__name__, (base,), {
        "__module__": base.__module__,
        "blueprint_dir": directory,
        "addon_name": addon_name,
    })
    logger.debug("Loaded blueprint %s from %s", bound.invocation_name(), directory)
    return bound


def _import_module(path: Path, addon_name: str) -> ModuleType:
    name = ".".join((
        _MODULE_PREFIX,
        _UNSAFE_IDENT.sub("_", addon_name) or "addon",
        _UNSAFE_IDENT.sub("_", path.parent.name) or "blueprint",
    ))
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def _blueprint_class(module: ModuleType) -> type[Blueprint] | None:
    """``default`` if it is a Blueprint, else the first one defined in *module*."""
    default = getattr(module, "default", None)
    if isinstance(default, type) and issubclass(default, Blueprint):
        return default
    for value in vars(module).values():
        if (
            isinstance(value, type)
            and issubclass(value, Blueprint)
            and value is not Blueprint
            and value.__module__ == module.__name__
        ):
            return value
    return None

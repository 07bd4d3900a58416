"""
Blueprint — generate code from a template directory, or take it back out.

A blueprint has three parts:

  - ``locals(argv)``: builds the data interpolated into the templates.
  - ``files/``: templates copied into the project.  Paths may contain
    ``__key__`` markers, contents ``<%= expr %>`` markers.
  - ``post_install(argv)`` / ``post_uninstall(argv)``: hooks for steps
    plain templating can't express (adding a route, installing a package).

``destroy`` only deletes files whose content still equals what the
blueprint would generate now, so files edited after generation survive.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Literal

from blueprintkit.core.context import destination_root
from blueprintkit.core.models.config import ToolConfig
from blueprintkit.core.models.template import FileAction
from blueprintkit.core.services import routes
from blueprintkit.core.services.templating import (
    interpolate_path,
    render_file,
    walk_templates,
)

logger = logging.getLogger(__name__)

Action = Literal["generate", "destroy"]

_PARAM_RE = re.compile(r"<([^<>\s]+?)(\.\.)?>|\[([^\[\]\s]+?)(\.\.)?\]")


class BlueprintError(Exception):
    """Raised when a blueprint cannot be applied to the destination."""


@dataclass(frozen=True)
class ParamSpec:
    """One positional parameter parsed from a blueprint's ``params`` string."""

    name: str
    required: bool = True
    variadic: bool = False


def parse_params(spec: str) -> list[ParamSpec]:
    """Parse ``"<name> [type] [fields..]"`` into parameter specs.

    ``<x>`` is required, ``[x]`` optional, a trailing ``..`` takes the
    remaining arguments.
    """
    specs: list[ParamSpec] = []
    for match in _PARAM_RE.finditer(spec or ""):
        if match.group(1):
            specs.append(ParamSpec(match.group(1), True, bool(match.group(2))))
        else:
            specs.append(ParamSpec(match.group(3), False, bool(match.group(4))))
    return specs


@dataclass
class BlueprintResult:
    """Outcome of one generate/destroy run."""

    blueprint: str
    action: Action
    dry_run: bool = False
    files: list[FileAction] = field(default_factory=list)
    hook_error: str | None = None

    def count(self, status: str) -> int:
        return sum(1 for f in self.files if f.status == status)

    def to_dict(self) -> dict:
        return {
            "blueprint": self.blueprint,
            "action": self.action,
            "dry_run": self.dry_run,
            "files": [f.model_dump() for f in self.files],
            "hook_error": self.hook_error,
        }


class Blueprint:
    """Base class for every blueprint.

    Class attributes set by the blueprint author:
        blueprint_name: Invocation name (falls back to the directory name).
        description:    One-line help text.
        params:         Positional parameters, e.g. ``"<name> [type]"``.
        flags:          Options: ``{"name": {"description", "type", "default"}}``
                        where type is ``string``, ``boolean`` or ``number``.

    Class attributes set at discovery:
        blueprint_dir:  Source directory of the blueprint.
        addon_name:     Addon that supplied it.
    """

    blueprint_name: ClassVar[str | None] = None
    description: ClassVar[str] = ""
    params: ClassVar[str] = ""
    flags: ClassVar[dict[str, dict[str, Any]]] = {}

    blueprint_dir: ClassVar[Path | None] = None
    addon_name: ClassVar[str] = ""

    def __init__(
        self,
        action: Action = "generate",
        *,
        dest_root: Path | None = None,
        config: ToolConfig | None = None,
        dry_run: bool = False,
        force: bool = False,
    ) -> None:
        self.action = action
        self.dest_root = (dest_root or destination_root()).resolve()
        self.config = config or ToolConfig()
        self.dry_run = dry_run
        self.force = force

    @classmethod
    def invocation_name(cls) -> str:
        if cls.blueprint_name:
            return cls.blueprint_name
        if cls.blueprint_dir is not None:
            return cls.blueprint_dir.name
        return cls.__name__.lower()

    @property
    def template_files(self) -> Path:
        """The blueprint's templates directory, ``<blueprint_dir>/files``."""
        if self.blueprint_dir is None:
            raise BlueprintError(f"Blueprint {self.invocation_name()} has no source directory")
        return self.blueprint_dir / "files"

    # ── Hooks ───────────────────────────────────────────────────

    def locals(self, argv: dict[str, Any]) -> dict[str, Any]:
        """Data interpolated into the template files."""
        return {}

    def post_install(self, argv: dict[str, Any]) -> None:
        """Runs after the templates are copied."""

    def post_uninstall(self, argv: dict[str, Any]) -> None:
        """Runs after generated files are removed.

        Should reverse ``post_install`` without destroying user changes.
        """

    # ── Operations ──────────────────────────────────────────────

    def run(self, argv: dict[str, Any]) -> BlueprintResult:
        """Delegate to generate or destroy."""
        if self.action == "generate":
            return self.generate(argv)
        return self.destroy(argv)

    def generate(self, argv: dict[str, Any]) -> BlueprintResult:
        """Copy the templates into the destination, then run post_install."""
        data = self.locals(argv)
        result = BlueprintResult(self.invocation_name(), "generate", dry_run=self.dry_run)
        files_dir = self.template_files

        for relpath in walk_templates(files_dir):
            dest_rel = interpolate_path(relpath, data)
            dest = self._destination(dest_rel)

            if dest.exists():
                logger.info("already exists %s", dest_rel)
                result.files.append(FileAction(path=dest_rel, status="exists", source=relpath))
                continue

            content = render_file(files_dir / relpath, data, name=relpath)
            if not self.dry_run:
                dest.parent.mkdir(parents=True, exist_ok=True)
                _write(dest, content)
            logger.info("create %s", dest_rel)
            result.files.append(FileAction(path=dest_rel, status="create", source=relpath))

        if self.dry_run:
            return result

        try:
            self.post_install(argv)
        except Exception as e:
            logger.error("post_install failed for %s: %s", result.blueprint, e, exc_info=True)
            result.hook_error = str(e) or type(e).__name__

        return result

    def destroy(self, argv: dict[str, Any]) -> BlueprintResult:
        """Delete generated files that are still unmodified, then run post_uninstall."""
        data = self.locals(argv)
        result = BlueprintResult(self.invocation_name(), "destroy", dry_run=self.dry_run)
        files_dir = self.template_files
        deleted: list[Path] = []

        for relpath in walk_templates(files_dir):
            dest_rel = interpolate_path(relpath, data)
            dest = self._destination(dest_rel)

            if not dest.exists():
                logger.info("missing %s", dest_rel)
                result.files.append(FileAction(path=dest_rel, status="missing", source=relpath))
                continue

            unmodified = dest.is_file() and _matches(dest, render_file(files_dir / relpath, data, name=relpath))
            if not unmodified and not (self.force and dest.is_file()):
                logger.info("skipped %s", dest_rel)
                result.files.append(FileAction(path=dest_rel, status="skipped", source=relpath))
                continue

            logger.info("destroy %s%s", dest_rel, "" if unmodified else " (forced)")
            result.files.append(FileAction(
                path=dest_rel, status="destroy", source=relpath, forced=not unmodified,
            ))
            if not self.dry_run:
                dest.unlink()
                deleted.append(dest)

        if self.dry_run:
            return result

        self._prune_empty_dirs(deleted)
        self.post_uninstall(argv)
        return result

    # ── Routes ──────────────────────────────────────────────────

    @property
    def routes_path(self) -> Path:
        return self.dest_root / self.config.routes_file

    def add_route(
        self,
        method: str,
        url_pattern: str,
        action_path: str | None = None,
        *args: str,
    ) -> bool:
        """Add a route to the project's router; False if it was already there."""
        return routes.add_route(self.routes_path, method, url_pattern, action_path, *args)

    def remove_route(
        self,
        method: str,
        url_pattern: str,
        action_path: str | None = None,
        *args: str,
    ) -> int:
        """Remove a route from the project's router; returns how many went."""
        return routes.remove_route(self.routes_path, method, url_pattern, action_path, *args)

    # ── Internals ───────────────────────────────────────────────

    def _destination(self, dest_rel: str) -> Path:
        dest = (self.dest_root / dest_rel).resolve()
        if dest != self.dest_root and self.dest_root not in dest.parents:
            raise BlueprintError(f"Refusing to write outside {self.dest_root}: {dest_rel}")
        return dest

    def _prune_empty_dirs(self, deleted: list[Path]) -> None:
        """Remove directories emptied by destroy, never the destination root."""
        for path in deleted:
            parent = path.parent
            while parent != self.dest_root and self.dest_root in parent.parents:
                if not parent.is_dir() or any(parent.iterdir()):
                    break
                parent.rmdir()
                logger.debug("Removed empty directory %s", parent)
                parent = parent.parent


def _write(dest: Path, content: str | bytes) -> None:
    data = content if isinstance(content, bytes) else content.encode("utf-8")
    dest.write_bytes(data)


def _matches(dest: Path, expected: str | bytes) -> bool:
    data = expected if isinstance(expected, bytes) else expected.encode("utf-8")
    return dest.read_bytes() == data

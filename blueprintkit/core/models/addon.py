"""
Addon model — a package that can supply blueprints.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class Addon(BaseModel):
    """A blueprint source: the tool itself, a dependency, or the project.

    Attributes:
        name: Package name (from package.json, or the tool name).
        dir:  Package root directory.
        pkg:  Parsed package.json (empty for the bundled blueprints).
        blueprint_dirs: Directories scanned for blueprints, in order.
    """

    name: str
    dir: Path
    pkg: dict[str, Any] = Field(default_factory=dict)
    blueprint_dirs: list[Path] = Field(default_factory=list)

    @property
    def keywords(self) -> list[str]:
        raw = self.pkg.get("keywords") or []
        return [str(k) for k in raw] if isinstance(raw, list) else []

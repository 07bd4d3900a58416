"""
Project context — which directory blueprints are generated into.

The root is set ONCE at startup by the CLI entry point
(``main.py → context.set_project_root(root)``).  It stays None outside
a project, and destination_root() then falls back to the current
working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


_project_root: Optional[Path] = None


def set_project_root(root: Optional[Path]) -> None:
    """Register the project root for the current process."""
    global _project_root
    _project_root = root


def destination_root() -> Path:
    """Directory generated files are written into."""
    return _project_root or Path.cwd()

"""
Shared test fixtures and configuration.
"""

import json
import textwrap
from pathlib import Path
from typing import Callable

import pytest

ROUTES_JS = textwrap.dedent("""\
    export default function drawRoutes(router) {
      router.get('/', 'index');
      router.resource('post');
    }
""")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A minimal project: package.json plus an empty routes file."""
    root = tmp_path / "my-app"
    root.mkdir()
    (root / "package.json").write_text(json.dumps({
        "name": "my-app",
        "dependencies": {"denali": "^0.1.0"},
    }))
    (root / "config").mkdir()
    (root / "config" / "routes.js").write_text(ROUTES_JS)
    return root


@pytest.fixture
def write_blueprint() -> Callable[..., Path]:
    """Create ``<parent>/<name>/`` with optional blueprint.py and files/."""

    def _write(
        parent: Path,
        name: str,
        files: dict[str, str | bytes] | None = None,
        module: str | None = None,
    ) -> Path:
        bp_dir = parent / name
        bp_dir.mkdir(parents=True, exist_ok=True)
        if module is not None:
            (bp_dir / "blueprint.py").write_text(textwrap.dedent(module))
        for rel, content in (files or {}).items():
            target = bp_dir / "files" / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content)
        return bp_dir

    return _write

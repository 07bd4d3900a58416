"""
Template rendering for blueprint files.

Two mechanisms:
  1. Path markers:     ``__key__`` in a file or directory name
  2. Content markers:  ``<%= expr %>``, ``<% if x %>…<% endif %>``, ``<%# note %>``

Content is rendered by Jinja2 with ERB-style delimiters, so templates
stay readable inside JavaScript/TypeScript files where ``{{`` is common.
Generate and destroy both go through ``render_content`` so a freshly
generated file always compares equal to its template.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator

import jinja2

logger = logging.getLogger(__name__)

# Non-greedy: "__a__/__b__" is two markers, not one
PATH_MARKER = re.compile(r"__(\S+?)__")

_IGNORED_DIRS = frozenset({"__pycache__"})
_IGNORED_SUFFIXES = frozenset({".pyc", ".pyo"})


class TemplateRenderError(Exception):
    """Raised when a template cannot be rendered with the given data."""


@lru_cache(maxsize=1)
def content_environment() -> jinja2.Environment:
    """Jinja environment shared by every blueprint."""
    return jinja2.Environment(
        variable_start_string="<%=",
        variable_end_string="%>",
        block_start_string="<%",
        block_end_string="%>",
        comment_start_string="<%#",
        comment_end_string="%>",
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
        autoescape=False,
    )


def interpolate_path(relpath: str, data: dict[str, Any]) -> str:
    """Replace ``__key__`` markers in a relative path.

    Markers whose key is not in *data* are left as-is, so names like
    ``__init__.py`` survive untouched.
    """

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in data:
            logger.debug("No value for path marker %r in %s", key, relpath)
            return match.group(0)
        return str(data[key])

    return PATH_MARKER.sub(_sub, relpath)


def render_content(source: str, data: dict[str, Any], *, name: str = "<template>") -> str:
    """Render a template file's content.

    Raises:
        TemplateRenderError: Syntax errors or names missing from *data*.
    """
    env = content_environment()
    try:
        template = env.from_string(source)
        return template.render(**data)
    except jinja2.TemplateSyntaxError as e:
        raise TemplateRenderError(f"{name}:{e.lineno}: {e.message}") from e
    except jinja2.UndefinedError as e:
        raise TemplateRenderError(f"{name}: {e.message}") from e


def walk_templates(files_dir: Path) -> Iterator[str]:
    """Yield template file paths relative to *files_dir*, sorted, POSIX-style.

    Directories are not yielded; a missing *files_dir* yields nothing.
    """
    if not files_dir.is_dir():
        logger.debug("No template directory at %s", files_dir)
        return

    for path in sorted(files_dir.rglob("*")):
        rel = path.relative_to(files_dir)
        if any(part in _IGNORED_DIRS for part in rel.parts):
            continue
        if path.suffix in _IGNORED_SUFFIXES:
            continue
        if path.is_dir():
            continue
        yield rel.as_posix()


def read_template(path: Path) -> str | bytes:
    """Read a template file: text when it is UTF-8, raw bytes otherwise."""
    raw = path.read_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw


def render_file(path: Path, data: dict[str, Any], *, name: str) -> str | bytes:
    """Expected output for one template file.

    Binary templates come back unchanged; text templates are rendered.
    """
    source = read_template(path)
    if isinstance(source, bytes):
        return source
    return render_content(source, data, name=name)

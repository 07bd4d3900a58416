"""
Name helpers for blueprint ``locals()`` — turn a CLI argument into the
identifiers a template needs.

    dasherize("BlogPost")    → "blog-post"
    pascal_case("blog-post") → "BlogPost"
    camel_case("blog_post")  → "blogPost"
"""

from __future__ import annotations

import re

_WORD_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")


def words(name: str) -> list[str]:
    """Split camelCase, PascalCase, snake_case and kebab-case into lowercase words."""
    spaced = _WORD_BOUNDARY_RE.sub(r"\1 \2", (name or "").strip())
    return [w.lower() for w in _SEPARATOR_RE.split(spaced) if w]


def dasherize(name: str) -> str:
    return "-".join(words(name))


def underscore(name: str) -> str:
    return "_".join(words(name))


def pascal_case(name: str) -> str:
    return "".join(w.capitalize() for w in words(name))


def camel_case(name: str) -> str:
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def last_segment(path: str) -> str:
    """``"admin/posts/show"`` → ``"show"``."""
    parts = [p for p in (path or "").strip("/").split("/") if p]
    return parts[-1] if parts else ""

"""
Routes patcher — add/remove router invocations in ``config/routes.js``.

The routes file exports a route-drawing function whose first parameter
is the router::

    export default function drawRoutes(router) {
      router.get('/', 'index');
      router.resource('post');
    }

``module.exports = function (router) { ... }`` and arrow functions are
accepted too.  The file is parsed with tree-sitter and edited as text
at the byte ranges of the statements involved, so everything outside
the edit keeps its original formatting.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

logger = logging.getLogger(__name__)

_FUNCTION_TYPES = frozenset({
    "function_declaration",
    "function_expression",
    "arrow_function",
    "generator_function_declaration",
    "generator_function",
})

_INDENT_STEP = "  "

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

# Backslash + line terminator is a line continuation
_LINE_TERMINATORS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})


class RoutesError(Exception):
    """Raised when the routes file cannot be edited as a route-drawing module."""


@dataclass
class _DrawRoutes:
    """The parsed route-drawing function."""

    source: bytes
    router: str
    body: Node
    function: Node


@lru_cache(maxsize=1)
def _parser() -> Parser:
    return Parser(Language(tree_sitter_javascript.language()))


# ── Public API ──────────────────────────────────────────────────


def add_route(
    routes_path: Path,
    method: str,
    url_pattern: str,
    action_path: str | None = None,
    *args: str,
) -> bool:
    """Add ``router.<method>(url_pattern, action_path, *args)``.

    Returns:
        True if the file was changed, False if the route already existed.

    Raises:
        RoutesError: The file is missing or not a valid route-drawing module.
    """
    expected = _route_args(url_pattern, action_path, args)
    draw = _parse(routes_path)

    if _matching_statements(draw, method, expected):
        logger.info("Route %s %s already present in %s", method, url_pattern, routes_path)
        return False

    statement = _format_statement(draw.router, method, expected)
    invocations = _router_statements(draw)

    if invocations:
        anchor = invocations[-1][0]
        indent = _line_indent(draw.source, anchor.start_byte) or _body_indent(draw)
        insert_at = _end_of_statement(anchor)
        patch = b"\n" + (indent + statement).encode("utf-8")
        updated = draw.source[:insert_at] + patch + draw.source[insert_at:]
    else:
        updated = _insert_first(draw, statement)

    _write(routes_path, updated)
    logger.info("Added route %s %s to %s", method, url_pattern, routes_path)
    return True


def remove_route(
    routes_path: Path,
    method: str,
    url_pattern: str,
    action_path: str | None = None,
    *args: str,
) -> int:
    """Remove every ``router.<method>(url_pattern, action_path, *args)``.

    Returns:
        Number of statements removed.

    Raises:
        RoutesError: The file is missing or not a valid route-drawing module.
    """
    expected = _route_args(url_pattern, action_path, args)
    draw = _parse(routes_path)

    matches = _matching_statements(draw, method, expected)
    if not matches:
        logger.info("Route %s %s not found in %s", method, url_pattern, routes_path)
        return 0

    source = draw.source
    for node in sorted(matches, key=lambda n: n.start_byte, reverse=True):
        start, end = _removal_span(source, node)
        source = source[:start] + source[end:]

    _write(routes_path, source)
    logger.info(
        "Removed %d route(s) %s %s from %s", len(matches), method, url_pattern, routes_path,
    )
    return len(matches)


def list_routes(routes_path: Path) -> list[tuple[str, list[str | None]]]:
    """Every router invocation as ``(method, [argument values])``.

    Non-string arguments are reported as None.
    """
    draw = _parse(routes_path)
    return [
        (method, [_string_value(a) for a in arguments])
        for _, method, arguments in _router_statements(draw)
    ]


# ── Parsing ─────────────────────────────────────────────────────


def _parse(routes_path: Path) -> _DrawRoutes:
    if not routes_path.is_file():
        raise RoutesError(f"Routes file not found: {routes_path}")

    source = routes_path.read_bytes()
    tree = _parser().parse(source)
    if tree.root_node.has_error:
        raise RoutesError(f"Cannot parse {routes_path}: fix its syntax errors first")

    function = _find_draw_function(tree.root_node)
    if function is None:
        raise RoutesError(
            f"No exported route-drawing function in {routes_path} "
            "(expected 'export default function (router) { ... }')"
        )

    router = _first_param(function)
    if router is None:
        raise RoutesError(f"Route-drawing function in {routes_path} takes no router argument")

    body = function.child_by_field_name("body")
    if body is None or body.type != "statement_block":
        raise RoutesError(f"Route-drawing function in {routes_path} has no block body")

    return _DrawRoutes(source=source, router=router, body=body, function=function)


def _find_draw_function(root: Node) -> Node | None:
    """``export default <function>`` or ``module.exports = <function>``."""
    for child in root.named_children:
        if child.type == "export_statement":
            if not any(c.type == "default" for c in child.children):
                continue
            for candidate in child.named_children:
                if candidate.type in _FUNCTION_TYPES:
                    return candidate

        elif child.type == "expression_statement" and child.named_children:
            expr = child.named_children[0]
            if expr.type != "assignment_expression":
                continue
            left = expr.child_by_field_name("left")
            right = expr.child_by_field_name("right")
            if left is None or right is None:
                continue
            if _text(left).replace(" ", "") == "module.exports" and right.type in _FUNCTION_TYPES:
                return right

    return None


def _first_param(function: Node) -> str | None:
    single = function.child_by_field_name("parameter")
    if single is not None and single.type == "identifier":
        return _text(single)

    params = function.child_by_field_name("parameters")
    if params is None:
        return None
    for param in params.named_children:
        if param.type == "identifier":
            return _text(param)
        if param.type == "assignment_pattern":
            left = param.child_by_field_name("left")
            if left is not None and left.type == "identifier":
                return _text(left)
        if param.type != "comment":
            return None
    return None


def _router_call(statement: Node, router: str) -> tuple[str, list[Node]] | None:
    """``(method, argument nodes)`` if *statement* is ``router.<method>(...)``."""
    if statement.type != "expression_statement" or not statement.named_children:
        return None
    expr = statement.named_children[0]
    if expr.type != "call_expression":
        return None
    callee = expr.child_by_field_name("function")
    if callee is None or callee.type != "member_expression":
        return None
    obj = callee.child_by_field_name("object")
    prop = callee.child_by_field_name("property")
    if obj is None or prop is None:
        return None
    if obj.type != "identifier" or _text(obj) != router:
        return None
    arguments = expr.child_by_field_name("arguments")
    args = [a for a in arguments.named_children if a.type != "comment"] if arguments else []
    return _text(prop), args


def _router_statements(draw: _DrawRoutes) -> list[tuple[Node, str, list[Node]]]:
    """``(statement, method, argument nodes)`` for each router invocation."""
    found = []
    for stmt in draw.body.named_children:
        call = _router_call(stmt, draw.router)
        if call is not None:
            found.append((stmt, *call))
    return found


def _matching_statements(draw: _DrawRoutes, method: str, expected: list[str]) -> list[Node]:
    return [
        stmt for stmt, name, arguments in _router_statements(draw)
        if name == method and [_string_value(a) for a in arguments] == expected
    ]


def _end_of_statement(statement: Node) -> int:
    """End of *statement* plus any comments trailing it on the same line."""
    end = statement.end_byte
    row = statement.end_point[0]
    sibling = statement.next_named_sibling
    while sibling is not None and sibling.type == "comment" and sibling.start_point[0] == row:
        end = sibling.end_byte
        sibling = sibling.next_named_sibling
    return end


# ── Text helpers ────────────────────────────────────────────────


def _text(node: Node) -> str:
    return (node.text or b"").decode("utf-8")


def _string_value(node: Node) -> str | None:
    """Literal value of a JS string (or substitution-free template), else None."""
    if node.type == "template_string":
        if any(c.type == "template_substitution" for c in node.named_children):
            return None
    elif node.type != "string":
        return None
    return _ESCAPE_RE.sub(_unescape, _text(node)[1:-1])


def _unescape(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        code = int(seq[2:-1], 16)
        return chr(code) if code <= 0x10FFFF else match.group(0)
    if len(seq) > 1 and seq[0] in "ux":
        return chr(int(seq[1:], 16))
    if seq in _LINE_TERMINATORS:
        return ""
    return _SIMPLE_ESCAPES.get(seq, seq)


def _quote(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def _route_args(url_pattern: str, action_path: str | None, args: tuple[str, ...]) -> list[str]:
    values = [url_pattern]
    if action_path is not None:
        values.append(action_path)
    values.extend(args)
    return values


def _format_statement(router: str, method: str, values: list[str]) -> str:
    return f"{router}.{method}({', '.join(_quote(v) for v in values)});"


def _line_start(source: bytes, offset: int) -> int:
    return source.rfind(b"\n", 0, offset) + 1


def _line_indent(source: bytes, offset: int) -> str:
    """Whitespace before *offset* on its line; "" if other code precedes it."""
    prefix = source[_line_start(source, offset):offset]
    if prefix.strip():
        return ""
    return prefix.decode("utf-8")


def _body_indent(draw: _DrawRoutes) -> str:
    """One step deeper than the line the function starts on."""
    line = draw.source[_line_start(draw.source, draw.function.start_byte):draw.function.start_byte]
    outer = line[: len(line) - len(line.lstrip(b" \t"))]
    return outer.decode("utf-8") + _INDENT_STEP


def _insert_first(draw: _DrawRoutes, statement: str) -> bytes:
    source = draw.source
    statements = draw.body.named_children
    if statements:
        first = statements[0]
        indent = _line_indent(source, first.start_byte)
        if indent or _line_start(source, first.start_byte) == first.start_byte:
            patch = (statement + "\n" + indent).encode("utf-8")
        else:
            patch = (statement + " ").encode("utf-8")
        return source[:first.start_byte] + patch + source[first.start_byte:]

    # Empty body: rewrite "{ }" as a block holding the one statement
    body_indent = _body_indent(draw)
    closing_indent = body_indent[: -len(_INDENT_STEP)]
    inner = f"\n{body_indent}{statement}\n{closing_indent}".encode("utf-8")
    open_brace = draw.body.start_byte + 1
    close_brace = draw.body.end_byte - 1
    return source[:open_brace] + inner + source[close_brace:]


def _removal_span(source: bytes, node: Node) -> tuple[int, int]:
    """Byte span to delete: the whole line when the statement is alone on it."""
    start, end = node.start_byte, node.end_byte
    line_start = _line_start(source, start)
    line_end = source.find(b"\n", end)
    if line_end == -1:
        line_end = len(source)
    alone = not source[line_start:start].strip() and not source[end:line_end].strip()
    if alone:
        return line_start, min(line_end + 1, len(source))
    # Also eat the whitespace separating it from the next statement
    while end < line_end and source[end:end + 1] in (b" ", b"\t"):
        end += 1
    return start, end


def _write(routes_path: Path, source: bytes) -> None:
    routes_path.write_bytes(source)

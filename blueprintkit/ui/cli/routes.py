"""
CLI commands for the project's routes file.

Thin wrappers over ``blueprintkit.core.services.routes``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from blueprintkit.core.context import destination_root
from blueprintkit.core.models.config import ToolConfig


def _routes_path(ctx: click.Context) -> Path:
    """Routes file of the current project (or the working directory)."""
    obj = ctx.find_object(dict) or {}
    config: ToolConfig = obj.get("config") or ToolConfig()
    return destination_root() / config.routes_file


@click.group()
def routes() -> None:
    """Routes — list, add, or remove router invocations."""


@routes.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_routes(ctx: click.Context, as_json: bool) -> None:
    """Show the router invocations in the routes file."""
    from blueprintkit.core.services.routes import RoutesError, list_routes as _list

    path = _routes_path(ctx)
    try:
        found = _list(path)
    except RoutesError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(
            [{"method": method, "args": args} for method, args in found], indent=2,
        ))
        return

    if not found:
        click.secho("No routes defined.", fg="yellow")
        return

    click.secho(f"🧭 Routes ({len(found)}):", fg="cyan", bold=True)
    for method, args in found:
        shown = ", ".join("…" if a is None else a for a in args)
        click.echo(f"   {method:<8} {shown}")


@routes.command("add")
@click.argument("method")
@click.argument("url_pattern")
@click.argument("action_path", required=False)
@click.argument("args", nargs=-1)
@click.pass_context
def add(
    ctx: click.Context,
    method: str,
    url_pattern: str,
    action_path: str | None,
    args: tuple[str, ...],
) -> None:
    """Add a route, e.g. ``routes add get /posts posts/list``."""
    from blueprintkit.core.services.routes import RoutesError, add_route

    path = _routes_path(ctx)
    try:
        changed = add_route(path, method, url_pattern, action_path, *args)
    except RoutesError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if changed:
        click.secho(f"✅ Added {method} {url_pattern}", fg="green")
    else:
        click.secho(f"⊘ {method} {url_pattern} already routed", fg="yellow")


@routes.command("remove")
@click.argument("method")
@click.argument("url_pattern")
@click.argument("action_path", required=False)
@click.argument("args", nargs=-1)
@click.pass_context
def remove(
    ctx: click.Context,
    method: str,
    url_pattern: str,
    action_path: str | None,
    args: tuple[str, ...],
) -> None:
    """Remove a route, e.g. ``routes remove get /posts posts/list``."""
    from blueprintkit.core.services.routes import RoutesError, remove_route

    path = _routes_path(ctx)
    try:
        removed = remove_route(path, method, url_pattern, action_path, *args)
    except RoutesError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if removed:
        click.secho(f"✅ Removed {removed} route(s) {method} {url_pattern}", fg="green")
    else:
        click.secho(f"⊘ {method} {url_pattern} not found", fg="yellow")

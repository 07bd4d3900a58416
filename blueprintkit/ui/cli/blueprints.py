"""
CLI commands for blueprints — generate, destroy, list.

``generate`` and ``destroy`` are groups whose subcommands are the
discovered blueprints; each blueprint declares its own positional
params and flags.  Thin wrappers over ``blueprintkit.core``.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from blueprintkit.core.config.blueprint_loader import find_blueprints
from blueprintkit.core.config.loader import ConfigError
from blueprintkit.core.models.config import ToolConfig
from blueprintkit.core.services.blueprint import (
    Action,
    Blueprint,
    BlueprintError,
    BlueprintResult,
    parse_params,
)
from blueprintkit.core.services.routes import RoutesError
from blueprintkit.core.services.templating import TemplateRenderError

logger = logging.getLogger(__name__)

_BLUEPRINTS_KEY = "blueprintkit.blueprints"

_STATUS_STYLE = {
    "create": ("create", "green"),
    "exists": ("already exists", "green"),
    "destroy": ("destroy", "red"),
    "skipped": ("skipped", "blue"),
    "missing": ("missing", "bright_black"),
}

_FLAG_TYPES: dict[str, Any] = {
    "string": click.STRING,
    "number": click.FLOAT,
    "integer": click.INT,
}


# ── Discovery ───────────────────────────────────────────────────


def discovered_blueprints(ctx: click.Context) -> dict[str, type[Blueprint]]:
    """Blueprints for this invocation, discovered once per command line."""
    root = ctx.find_root()
    if _BLUEPRINTS_KEY not in root.meta:
        obj = ctx.find_object(dict) or {}
        project_root: Path | None = obj.get("project_root")
        root.meta[_BLUEPRINTS_KEY] = find_blueprints(
            is_local=project_root is not None,
            project_root=project_root,
            config=obj.get("config"),
        )
    return root.meta[_BLUEPRINTS_KEY]


def configure_blueprints(
    blueprints: dict[str, type[Blueprint]],
    action: Action,
) -> dict[str, click.Command]:
    """Give each blueprint the chance to build its command.

    A blueprint that fails to configure itself is reported and left out.
    """
    commands: dict[str, click.Command] = {}
    for name, blueprint_cls in blueprints.items():
        try:
            logger.debug(
                "Configuring %s blueprint (invocation: %r)",
                blueprint_cls.invocation_name(), name,
            )
            commands[name] = blueprint_command(blueprint_cls, name, action)
        except Exception as e:
            logger.warning("%s blueprint failed to configure itself: %s", name, e)
            logger.debug("Blueprint configure traceback", exc_info=True)
    return commands


def find_and_configure_blueprints(
    is_local: bool,
    action: Action,
    project_root: Path | None = None,
    config: ToolConfig | None = None,
) -> dict[str, click.Command]:
    """Convenience for ``find_blueprints()`` then ``configure_blueprints()``."""
    blueprints = find_blueprints(is_local, project_root, config)
    return configure_blueprints(blueprints, action)


def blueprint_command(
    blueprint_cls: type[Blueprint],
    name: str,
    action: Action,
) -> click.Command:
    """Build the click command that runs *blueprint_cls* for *action*."""
    params: list[click.Parameter] = []

    for spec in parse_params(blueprint_cls.params):
        params.append(click.Argument(
            [spec.name],
            required=spec.required,
            nargs=-1 if spec.variadic else 1,
        ))

    for flag, options in (blueprint_cls.flags or {}).items():
        kind = options.get("type", "string")
        help_text = options.get("description", "")
        if kind == "boolean":
            params.append(click.Option(
                [f"--{flag}"],
                is_flag=True,
                default=bool(options.get("default", False)),
                help=help_text,
            ))
            continue
        if kind not in _FLAG_TYPES:
            raise ValueError(f"Unknown type {kind!r} for flag --{flag}")
        params.append(click.Option(
            [f"--{flag}"],
            type=_FLAG_TYPES[kind],
            default=options.get("default"),
            show_default=options.get("default") is not None,
            help=help_text,
        ))

    @click.pass_context
    def _callback(ctx: click.Context, **argv: Any) -> None:
        obj = ctx.find_object(dict) or {}
        as_json = obj.get("as_json", False)
        blueprint = blueprint_cls(
            action,
            dest_root=obj.get("project_root"),
            config=obj.get("config"),
            dry_run=obj.get("dry_run", False),
            force=obj.get("force", False),
        )
        try:
            result = blueprint.run(argv)
        except (BlueprintError, ConfigError, RoutesError, TemplateRenderError) as e:
            if as_json:
                click.echo(json.dumps({"error": str(e)}, indent=2))
            else:
                click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
        render_result(result, as_json=as_json)

    help_text = blueprint_cls.description or f"{name} blueprint"
    if blueprint_cls.addon_name:
        help_text += f" ({blueprint_cls.addon_name})"

    return click.Command(
        name,
        callback=_callback,
        params=params,
        help=help_text,
        short_help=blueprint_cls.description or None,
    )


class BlueprintGroup(click.Group):
    """A group whose subcommands are the discovered blueprints."""

    def __init__(self, *args: Any, action: Action = "generate", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.action = action

    def _blueprint_commands(self, ctx: click.Context) -> dict[str, click.Command]:
        key = f"{_BLUEPRINTS_KEY}.{self.action}"
        root = ctx.find_root()
        if key not in root.meta:
            root.meta[key] = configure_blueprints(discovered_blueprints(ctx), self.action)
        return root.meta[key]

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(self._blueprint_commands(ctx))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return self._blueprint_commands(ctx).get(cmd_name)

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        rows = []
        commands = [
            (name, self.get_command(ctx, name)) for name in self.list_commands(ctx)
        ]
        commands = [(n, c) for n, c in commands if c is not None and not c.hidden]
        if not commands:
            return
        limit = formatter.width - 6 - max(len(n) for n, _ in commands)
        for name, cmd in commands:
            rows.append((name, cmd.get_short_help_str(limit)))
        with formatter.section("Available Blueprints"):
            formatter.write_dl(rows)


# ── Rendering ───────────────────────────────────────────────────


def render_result(result: BlueprintResult, *, as_json: bool = False) -> None:
    """Print one line per file, colored by status."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.dry_run:
        click.secho(f"[dry-run] {result.action} {result.blueprint}", fg="yellow")

    if not result.files:
        click.secho(f"   {result.blueprint} has no template files", fg="yellow")

    for item in result.files:
        label, color = _STATUS_STYLE[item.status]
        if item.forced:
            label = f"{label} (forced)"
        click.secho(f"  {label}", fg=color, nl=False)
        click.echo(f" {item.path}")

    if result.hook_error:
        click.secho(f"❌ post_install failed: {result.hook_error}", fg="red")


# ── Commands ────────────────────────────────────────────────────


@click.group(cls=BlueprintGroup, action="generate")
@click.option("--dry-run", is_flag=True, help="Show what would be created without writing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(ctx: click.Context, dry_run: bool, as_json: bool) -> None:
    """Generate files from a blueprint."""
    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["as_json"] = as_json


@click.group(cls=BlueprintGroup, action="destroy")
@click.option("--dry-run", is_flag=True, help="Show what would be removed without deleting.")
@click.option("--force", is_flag=True, help="Also remove files modified since generation.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def destroy(ctx: click.Context, dry_run: bool, force: bool, as_json: bool) -> None:
    """Remove unmodified files generated by a blueprint."""
    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["force"] = force
    ctx.obj["as_json"] = as_json


@click.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_blueprints(ctx: click.Context, as_json: bool) -> None:
    """List available blueprints and where they come from."""
    blueprints = discovered_blueprints(ctx)

    if as_json:
        click.echo(json.dumps([
            {
                "name": name,
                "addon": cls.addon_name,
                "description": cls.description,
                "params": cls.params,
                "dir": str(cls.blueprint_dir) if cls.blueprint_dir else None,
            }
            for name, cls in sorted(blueprints.items())
        ], indent=2))
        return

    if not blueprints:
        click.secho("No blueprints found.", fg="yellow")
        return

    click.secho(f"📐 Blueprints ({len(blueprints)}):", fg="cyan", bold=True)
    width = max(len(name) for name in blueprints)
    for name, cls in sorted(blueprints.items()):
        params = f" {cls.params}" if cls.params else ""
        click.echo(f"   {name:<{width}}  [{cls.addon_name}]{params}")
        if cls.description:
            click.echo(f"   {'':<{width}}  {cls.description}")
    click.echo()

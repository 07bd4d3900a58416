"""
Blueprint — CLI entrypoint.

Usage:
    blueprint --help
    blueprint list
    blueprint generate model post
    blueprint destroy model post
    blueprint routes add get /posts posts/list
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from blueprintkit import __version__
from blueprintkit.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="blueprint")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to .blueprints.yml (default: auto-detect from package.json).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Blueprint — generate and destroy project files from templates."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        quiet_third_party=not debug,
    )

    # ── Project root + tool config ──────────────────────────────
    from blueprintkit.core.config.loader import ConfigError, find_project_root, load_config
    from blueprintkit.core.context import set_project_root

    explicit = Path(config_path) if config_path else None
    root = explicit.resolve().parent if explicit else find_project_root()
    set_project_root(root)
    ctx.obj["project_root"] = root

    try:
        ctx.obj["config"] = load_config(explicit, project_root=root)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


# ── Register sub-command groups from blueprintkit/ui/cli/ ──────────

from blueprintkit.ui.cli.blueprints import destroy, generate, list_blueprints  # noqa: E402
from blueprintkit.ui.cli.routes import routes  # noqa: E402

cli.add_command(generate)
cli.add_command(destroy)
cli.add_command(list_blueprints)
cli.add_command(routes)


if __name__ == "__main__":
    cli()

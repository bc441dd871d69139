"""Main CLI entry point for buildinfo.

Defines the CLI group and registers all subcommands.

Commands:
    accumulate    - Add a frontend request to a stored record
    finalize      - Merge resolved build sources into a stored record
    format        - Print a record, optionally without attrs
    image-config  - Print the record embedded in an image configuration
    filter-attrs  - Preview attribute filtering for a metadata key
    config        - Configuration management (path, show, init)

Subcommand help:
    buildinfo COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli"]

import sys
from pathlib import Path

import click

from buildinfo import __version__
from buildinfo.config import AppConfig
from buildinfo.utils.logging.logger_setup import setup_logging

from .commands.config import config
from .commands.inspect import filter_attrs_cmd, format_cmd, image_config
from .commands.record import accumulate, finalize
from .styling import style_error


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="BUILDINFO_CONFIG",
    help="Config file (default: OS config dir)",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, config_path: Path | None) -> None:
    """buildinfo: build provenance records for multi-platform builds."""
    if version:
        click.echo(f"buildinfo {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    # config commands must work even when the config file is broken
    if ctx.invoked_subcommand == "config":
        ctx.obj = config_path
        return

    try:
        app_config = AppConfig.load_or_default(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)
    setup_logging(app_config.logging)
    ctx.obj = app_config


# Register commands
cli.add_command(accumulate)
cli.add_command(finalize)
cli.add_command(format_cmd)
cli.add_command(image_config)
cli.add_command(filter_attrs_cmd)
cli.add_command(config)


def main() -> None:
    """CLI entry point."""
    cli()

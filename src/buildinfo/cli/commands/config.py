"""Config command group for buildinfo CLI.

Provides configuration management subcommands.
"""

from __future__ import annotations

__all__ = ["config"]

import sys
from pathlib import Path

import click

from buildinfo.config import AppConfig, get_config_path

from ..styling import style_dim, style_error, style_header, style_success


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("path")
@click.pass_obj
def config_path_cmd(config_path: Path | None) -> None:
    """Show config file path.

    Honors --config and the BUILDINFO_CONFIG environment variable.
    """
    path = config_path or get_config_path()
    click.echo(str(path))

    if not path.exists():
        click.echo("(file does not exist - run 'buildinfo config init' to create)", err=True)


@config.command("show")
@click.pass_obj
def config_show(config_path: Path | None) -> None:
    """Display the effective configuration."""
    path = config_path or get_config_path()
    try:
        app_config = AppConfig.load_or_default(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    click.echo(style_header("Logging"))
    click.echo(f"  log_level: {app_config.logging.log_level}")
    click.echo(f"  log_file: {app_config.logging.log_file or style_dim('(none)')}")
    if not path.exists():
        click.echo(style_dim(f"Using defaults ({path} not found)."))


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING"]),
    default="WARNING",
    show_default=True,
    help="Minimum log level",
)
@click.option("--log-file", default=None, help="JSONL log file")
@click.pass_obj
def config_init(config_path: Path | None, force: bool, log_level: str, log_file: str | None) -> None:
    """Write a config file at the config path."""
    path = config_path or get_config_path()
    if path.exists() and not force:
        click.echo(style_error(f"Config already exists at {path} (use --force to overwrite)"), err=True)
        sys.exit(1)

    app_config = AppConfig.model_validate({"logging": {"log_level": log_level, "log_file": log_file}})
    app_config.save_to_file(path)
    click.echo(style_success(f"Config written: {path}"))

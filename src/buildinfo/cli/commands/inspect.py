"""Inspection commands for buildinfo CLI.

Read-only views: format a record, extract a record from an image
configuration, and preview attribute filtering.
"""

from __future__ import annotations

__all__ = ["filter_attrs_cmd", "format_cmd", "image_config"]

import json
import sys
from pathlib import Path

import click

from buildinfo.attrs import filter_attrs
from buildinfo.exceptions import DecodeError
from buildinfo.metadata import FormatOpts, format_buildinfo, from_image_config

from ..styling import style_dim, style_error
from .record import parse_pairs


def _echo_json(data: bytes) -> None:
    click.echo(json.dumps(json.loads(data), indent=2))


@click.command("format")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--remove-attrs", is_flag=True, help="Drop attrs, e.g. before publishing")
def format_cmd(path: Path, remove_attrs: bool) -> None:
    """Print the record in PATH, normalized.

    Exit codes:
        0: Record printed (nothing for an empty file)
        1: File is not a valid record
    """
    try:
        formatted = format_buildinfo(path.read_bytes(), FormatOpts(remove_attrs=remove_attrs))
    except DecodeError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)
    if formatted:
        _echo_json(formatted)


@click.command("image-config")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--remove-attrs", is_flag=True, help="Drop attrs from the printed record")
def image_config(path: Path, remove_attrs: bool) -> None:
    """Print the record embedded in the image configuration in PATH.

    Exit codes:
        0: Record printed, or the config carries none
        1: Config or embedded record is malformed
    """
    try:
        record = from_image_config(path.read_bytes())
    except DecodeError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    if record is None:
        click.echo(style_dim("No build info in image config."))
        return
    if remove_attrs:
        record = record.without_attrs()
    _echo_json(record.to_json())


@click.command("filter-attrs")
@click.argument("key")
@click.option(
    "--attr",
    "-a",
    "attrs",
    multiple=True,
    metavar="KEY=VALUE",
    callback=parse_pairs,
    help="Frontend attribute (repeatable)",
)
def filter_attrs_cmd(key: str, attrs: dict[str, str]) -> None:
    """Show which attributes would be recorded for metadata KEY."""
    filtered = filter_attrs(key, attrs)
    click.echo(json.dumps(dict(sorted(filtered.items())), indent=2))

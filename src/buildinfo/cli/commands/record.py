"""Record commands for buildinfo CLI.

Update records in a record store file (JSON object of metadata key ->
record), the way a build orchestrator would while solving a build.
"""

from __future__ import annotations

__all__ = ["accumulate", "finalize", "parse_pairs"]

import sys
from pathlib import Path

import click

from buildinfo.metadata import encode, get_metadata
from buildinfo.utils.file_helpers import load_record_store, save_record_store

from ..styling import style_error, style_success

_STORE_OPTION = click.option(
    "--record",
    "-r",
    "store_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Record store file (created if missing)",
)


def parse_pairs(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, str]:
    """Click callback turning repeated NAME=VALUE options into a dict.

    Attribute keys never contain "=", so attrs split on the first one.
    Source identifiers may (URL queries), so sources split on the last one.
    """
    result: dict[str, str] = {}
    for value in values:
        if "=" not in value:
            raise click.BadParameter(f"expected NAME=VALUE, got {value!r}", ctx=ctx, param=param)
        if param.name == "sources":
            name, _, item = value.rpartition("=")
        else:
            name, _, item = value.partition("=")
        result[name] = item
    return result


@click.command("accumulate")
@click.argument("key")
@_STORE_OPTION
@click.option("--frontend", "-f", default="", help="Frontend name (keeps stored one if omitted)")
@click.option(
    "--attr",
    "-a",
    "attrs",
    multiple=True,
    metavar="KEY=VALUE",
    callback=parse_pairs,
    help="Frontend request attribute (repeatable)",
)
def accumulate(key: str, store_path: Path, frontend: str, attrs: dict[str, str]) -> None:
    """Add a frontend request to the record for KEY.

    KEY is a metadata key, optionally platform scoped: "meta/linux/amd64".

    Exit codes:
        0: Record updated
        1: Store or attribute value is malformed
    """
    try:
        store = load_record_store(store_path)
        store[key] = get_metadata(store, key, frontend, attrs)
        save_record_store(store_path, store)
    except (OSError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)
    click.echo(style_success(f"Record updated: {key}"))


@click.command("finalize")
@click.argument("key")
@_STORE_OPTION
@click.option(
    "--source",
    "-s",
    "sources",
    multiple=True,
    metavar="IDENTIFIER=PIN",
    callback=parse_pairs,
    help="Resolved build source, e.g. docker-image://alpine=sha256:... (repeatable)",
)
def finalize(key: str, store_path: Path, sources: dict[str, str]) -> None:
    """Merge resolved build sources into the record for KEY.

    Exit codes:
        0: Record updated
        1: Store, record or source identifier is malformed
    """
    try:
        store = load_record_store(store_path)
        store[key] = encode(store, key, sources)
        save_record_store(store_path, store)
    except (OSError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)
    click.echo(style_success(f"Record finalized: {key}"))

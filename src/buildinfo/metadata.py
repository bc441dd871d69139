"""Metadata accumulation - building up a stored record across a build.

A record is kept per metadata key ("<base>" or "<base>/<platform>") and
updated at two points:

1. accumulate_request: when a frontend request is solved. Request
   attributes are layered over stored ones, input-context dependencies are
   decoded and attributes are filtered.
2. finalize_with_sources: when the builder has resolved all sources. The
   resolved sources are merged with the ones the frontend declared.

Both are fail-closed: any error propagates and nothing is returned.

Two projections are provided for consumers of finished records:
format_buildinfo (e.g. strip attrs for display) and from_image_config
(recover a record embedded in an image configuration).
"""

from __future__ import annotations

__all__ = [
    "FormatOpts",
    "accumulate_request",
    "encode",
    "finalize_with_sources",
    "format_buildinfo",
    "from_image_config",
    "get_metadata",
]

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import ValidationError

from buildinfo.attrs import filter_attrs
from buildinfo.constants import APP_NAME, CONTEXT_PREFIX, PLATFORM_SEPARATOR
from buildinfo.deps import decode_deps
from buildinfo.exceptions import DecodeError
from buildinfo.models import BuildInfo, ImageConfig, decode_buildinfo
from buildinfo.sources import merge_sources

_logger = logging.getLogger(f"{APP_NAME}.metadata")


def _merge_deps(
    new: dict[str, BuildInfo] | None,
    existing: dict[str, BuildInfo] | None,
) -> dict[str, BuildInfo] | None:
    """Layer newly decoded deps over existing ones; new wins on name collision."""
    if new is None and existing is None:
        return None
    return {**(existing or {}), **(new or {})}


def _narrowed_contexts(stored_attrs: Mapping[str, str | None] | None) -> dict[str, str | None]:
    """Context entries of a stored record that were already narrowed to its platform.

    They lost their "::<platform>" suffix when first filtered, so filtering
    them again under a platform-scoped key would drop them.
    """
    return {
        k: v
        for k, v in (stored_attrs or {}).items()
        if v is not None and k.startswith(CONTEXT_PREFIX) and PLATFORM_SEPARATOR not in k
    }


def _load_record(existing: bytes | None, key: str) -> BuildInfo | None:
    if not existing:
        return None
    return BuildInfo.from_json(existing, context=f"failed to unmarshal build info for {key!r}")


def accumulate_request(
    existing: bytes | None,
    key: str,
    frontend: str,
    req_attrs: Mapping[str, str] | None,
) -> bytes:
    """Create or update a record from a frontend request.

    Args:
        existing: Stored record for key, or None if there is none yet.
        key: Metadata key, used for platform scoping.
        frontend: Frontend name; overrides the stored one unless empty.
        req_attrs: Frontend request attributes.

    Returns:
        The updated record as JSON bytes.

    Raises:
        DecodeError: If the stored record or an input-metadata value is malformed.
    """
    stored = _load_record(existing, key)

    if stored is None:
        attrs: dict[str, str | None] = dict(req_attrs or {})
        record = BuildInfo(
            frontend=frontend,
            attrs=filter_attrs(key, attrs),
            deps=decode_deps(key, attrs),
        )
    else:
        # request attrs win over stored ones
        attrs = {k: v for k, v in (stored.attrs or {}).items() if v is not None}
        attrs.update(req_attrs or {})
        record = BuildInfo(
            frontend=frontend or stored.frontend,
            attrs={**_narrowed_contexts(stored.attrs), **filter_attrs(key, attrs)},
            sources=stored.sources,
            deps=_merge_deps(decode_deps(key, attrs), stored.deps),
        )

    _logger.debug(
        {
            "event": "request_accumulated",
            "key": key,
            "frontend": record.frontend,
            "attrs": len(record.attrs or {}),
            "deps": sorted(record.deps or {}),
        }
    )
    return record.to_json()


def finalize_with_sources(
    existing: bytes | None,
    key: str,
    build_sources: Mapping[str, str] | None,
) -> bytes:
    """Merge resolved build sources into a stored record.

    The record's own sources act as the frontend-declared set. Attributes are
    re-filtered and deps re-decoded from the stored attributes.

    Args:
        existing: Stored record for key; None is treated as an empty record.
        key: Metadata key, used for platform scoping.
        build_sources: Identifier string -> pin, as resolved by the builder.

    Returns:
        The updated record as JSON bytes.

    Raises:
        DecodeError: If the stored record or a dependency is malformed.
        ParseError: If a build source or image reference is malformed.
    """
    stored = _load_record(existing, key) or BuildInfo()

    record = BuildInfo(
        frontend=stored.frontend,
        attrs={**_narrowed_contexts(stored.attrs), **filter_attrs(key, stored.attrs)},
        sources=merge_sources(build_sources, stored.sources),
        deps=_merge_deps(decode_deps(key, stored.attrs), stored.deps),
    )

    _logger.debug(
        {
            "event": "sources_finalized",
            "key": key,
            "sources": [src.ref for src in record.sources],
        }
    )
    return record.to_json()


def get_metadata(
    metadata: Mapping[str, bytes] | None,
    key: str,
    frontend: str,
    req_attrs: Mapping[str, str] | None,
) -> bytes:
    """accumulate_request for the record stored under key in metadata."""
    return accumulate_request((metadata or {}).get(key), key, frontend, req_attrs)


def encode(
    metadata: Mapping[str, bytes] | None,
    key: str,
    build_sources: Mapping[str, str] | None,
) -> bytes:
    """finalize_with_sources for the record stored under key in metadata."""
    return finalize_with_sources((metadata or {}).get(key), key, build_sources)


@dataclass(frozen=True)
class FormatOpts:
    """Options for format_buildinfo.

    Attributes:
        remove_attrs: Drop attrs from the record, e.g. before publishing it.
    """

    remove_attrs: bool = False


def format_buildinfo(data: bytes, opts: FormatOpts | None = None) -> bytes:
    """Re-serialize a record with the given format options.

    Args:
        data: Record JSON bytes. Empty input is returned unchanged.
        opts: Format options.

    Returns:
        Formatted record JSON bytes.

    Raises:
        DecodeError: If data is not a valid record.
    """
    if not data:
        return data
    record = BuildInfo.from_json(data, context="failed to unmarshal buildinfo for formatting")
    if opts is not None and opts.remove_attrs:
        record = record.without_attrs()
    return record.to_json()


def from_image_config(data: bytes | None) -> BuildInfo | None:
    """Extract the record embedded in an image configuration.

    Args:
        data: Image configuration JSON bytes.

    Returns:
        The embedded record, or None if data is empty or carries no record.

    Raises:
        DecodeError: If the configuration or the embedded record is malformed.
    """
    if not data:
        return None
    try:
        config = ImageConfig.model_validate(json.loads(data))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        raise DecodeError("failed to unmarshal image config", e) from e
    if not config.build_info:
        return None
    return decode_buildinfo(config.build_info, context="failed to decode build info from image config")

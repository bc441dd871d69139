"""Source merging - which external inputs went into a build.

Two views of the same inputs have to be reconciled:

- build sources: what the builder actually resolved, as
  "<scheme>://<identifier>" -> pin, with image references already normalized
- frontend sources: what the build definition declared, with the image
  reference as the user wrote it (alias) and possibly duplicated

The merge keeps one Source per canonical key, preferring the user's own
reference text for images, and returns them sorted by ref.
"""

from __future__ import annotations

__all__ = ["merge_sources"]

import logging
from collections.abc import Mapping, Sequence

from buildinfo.constants import APP_NAME
from buildinfo.identifiers import GitIdentifier, HTTPIdentifier, ImageIdentifier, parse_identifier
from buildinfo.models import Source, SourceType
from buildinfo.redact import redact_credentials
from buildinfo.reference import parse_normalized_named, tag_name_only

_logger = logging.getLogger(f"{APP_NAME}.sources")


def _normalize_image_ref(ref: str) -> str:
    """Fully qualify an image reference and add the default tag.

    Raises:
        ParseError: If ref is not a valid image reference.
    """
    return str(tag_name_only(parse_normalized_named(ref)))


def _find_frontend_image(frontend_sources: Sequence[Source], alias: str) -> int | None:
    """Index of the first frontend image source declared under alias."""
    for index, fsrc in enumerate(frontend_sources):
        if fsrc.type == SourceType.DOCKER_IMAGE and fsrc.alias == alias:
            return index
    return None


def _git_key(identifier: GitIdentifier) -> str:
    key = identifier.remote
    if identifier.ref:
        key += "#" + identifier.ref
    if identifier.subdir:
        key += ":" + identifier.subdir
    return key


def merge_sources(
    build_sources: Mapping[str, str] | None,
    frontend_sources: Sequence[Source] | None,
) -> list[Source]:
    """Combine build sources with frontend-declared sources.

    Build sources are visited in mapping order; the first one seen for a
    canonical key wins. A frontend image source is consumed by the first
    build source whose normalized reference equals its alias. Frontend image
    sources left unconsumed (e.g. a stage that is only a FROM) are added
    with their own pin.

    Args:
        build_sources: Identifier string -> pin, as resolved by the builder.
        frontend_sources: Sources declared by the frontend. Not modified.

    Returns:
        Deduplicated sources sorted by ref.

    Raises:
        ParseError: If an identifier or an image reference is malformed.
    """
    remaining = list(frontend_sources or [])
    merged: dict[str, Source] = {}

    for raw, pin in (build_sources or {}).items():
        identifier = parse_identifier(raw)

        if isinstance(identifier, ImageIdentifier):
            ref = str(identifier.reference)
            index = _find_frontend_image(remaining, ref)
            if index is not None and ref not in merged:
                # keep the user's original reference text
                merged[ref] = Source(
                    type=SourceType.DOCKER_IMAGE,
                    ref=_normalize_image_ref(remaining[index].ref),
                    pin=pin,
                )
                remaining = remaining[:index] + remaining[index + 1 :]
            elif ref not in merged:
                merged[ref] = Source(type=SourceType.DOCKER_IMAGE, ref=ref, pin=pin)

        elif isinstance(identifier, GitIdentifier):
            key = _git_key(identifier)
            if key not in merged:
                merged[key] = Source(type=SourceType.GIT, ref=redact_credentials(key), pin=pin)

        elif isinstance(identifier, HTTPIdentifier):
            if identifier.url not in merged:
                merged[identifier.url] = Source(
                    type=SourceType.HTTP,
                    ref=redact_credentials(identifier.url),
                    pin=pin,
                )

        else:
            _logger.debug({"event": "source_skipped", "identifier": raw, "kind": type(identifier).__name__})

    # Leftover frontend images are mostly duplicates, but a build made of a
    # single FROM has no other record of its base image.
    for fsrc in remaining:
        if fsrc.type != SourceType.DOCKER_IMAGE or (fsrc.alias and fsrc.alias in merged):
            continue
        ref = _normalize_image_ref(fsrc.ref)
        # entries without alias (e.g. from an earlier merge) are keyed by ref
        key = fsrc.alias or ref
        if key in merged:
            continue
        merged[key] = Source(type=SourceType.DOCKER_IMAGE, ref=ref, pin=fsrc.pin)

    return sorted(merged.values(), key=lambda src: src.ref)

"""Dependency decoding from input-context metadata.

A named input context that was itself produced by a build carries the
exporter response of that build as an "input-metadata:<name>" attribute:

    input-metadata:base::linux/amd64 = '{"containerimage.buildinfo": "<base64 record>", ...}'

The embedded record becomes a dependency of the current record, named
after the context ("base").
"""

from __future__ import annotations

__all__ = ["decode_deps"]

import json
import logging
from collections.abc import Mapping

from buildinfo.attrs import platform_from_key
from buildinfo.constants import APP_NAME, EXPORTER_BUILD_INFO, INPUT_METADATA_PREFIX, PLATFORM_SEPARATOR
from buildinfo.exceptions import DecodeError
from buildinfo.models import BuildInfo, decode_buildinfo

_logger = logging.getLogger(f"{APP_NAME}.deps")


def decode_deps(key: str, attrs: Mapping[str, str | None] | None) -> dict[str, BuildInfo] | None:
    """Decode nested build info records added via input contexts.

    Attribute keys are visited in sorted order so the result does not depend
    on mapping order.

    Args:
        key: Metadata key; with a "/<platform>" part only entries for that
            platform are decoded.
        attrs: Raw frontend attributes.

    Returns:
        Mapping of dependency name to record, or None if there are none.

    Raises:
        DecodeError: If an input-metadata value or its embedded record is malformed.
    """
    platform = platform_from_key(key)
    platform_suffix = PLATFORM_SEPARATOR + platform if platform else ""

    attrs = attrs or {}
    deps: dict[str, BuildInfo] = {}
    for attr_key in sorted(attrs):
        value = attrs[attr_key]
        if value is None or not attr_key.startswith(INPUT_METADATA_PREFIX):
            continue
        if platform and not attr_key.endswith(platform_suffix):
            continue

        try:
            response = json.loads(value)
        except json.JSONDecodeError as e:
            raise DecodeError("failed to unmarshal input-metadata", e) from e
        # JSON null is an empty response
        if response is None:
            continue
        if not isinstance(response, dict) or not all(isinstance(v, str) for v in response.values()):
            raise DecodeError("failed to unmarshal input-metadata", TypeError("expected a mapping of strings"))

        encoded = response.get(EXPORTER_BUILD_INFO)
        if encoded is None:
            continue

        dep = decode_buildinfo(encoded, context="failed to decode buildinfo from input-metadata")

        name = attr_key[len(INPUT_METADATA_PREFIX) :]
        if platform_suffix:
            name = name[: -len(platform_suffix)]

        _logger.debug({"event": "dependency_decoded", "name": name, "frontend": dep.frontend})
        deps[name] = dep

    return deps or None

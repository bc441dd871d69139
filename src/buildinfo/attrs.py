"""Attribute filtering for provenance records.

Frontend options arrive as a flat mapping of string keys to optional string
values. Only options that can change the build output are kept:

- build-arg:* and label:*  always (except builder control args)
- context:*                 named contexts, scoped to the record's platform
- bare keys                 only those in KNOWN_ATTRS

Metadata keys are "<base>" or "<base>/<platform>", e.g. "meta/linux/arm64".
When a platform is present, per-platform context entries
("context:base::linux/arm64") are narrowed to that platform and lose
their "::<platform>" suffix.
"""

from __future__ import annotations

__all__ = [
    "filter_attrs",
    "is_control_arg",
    "platform_from_key",
]

from collections.abc import Mapping

from buildinfo.constants import (
    BUILD_ARG_PREFIX,
    CONTEXT_PREFIX,
    KNOWN_ATTRS,
    KNOWN_CONTROL_ARGS,
    LABEL_PREFIX,
    PLATFORM_SEPARATOR,
)

_CONTROL_ARG_PREFIXES: tuple[str, ...] = tuple(BUILD_ARG_PREFIX + name for name in KNOWN_CONTROL_ARGS)


def platform_from_key(key: str) -> str:
    """Return the platform part of a metadata key, or "" if there is none.

    Example:
        >>> platform_from_key("meta/linux/arm64")
        'linux/arm64'
        >>> platform_from_key("meta")
        ''
    """
    _, _, platform = key.partition("/")
    return platform


def is_control_arg(attr_key: str) -> bool:
    """Check whether an attribute key is a builder control arg."""
    return attr_key.startswith(_CONTROL_ARG_PREFIXES)


def _strip_suffix(value: str, suffix: str) -> str:
    if suffix and value.endswith(suffix):
        return value[: -len(suffix)]
    return value


def filter_attrs(key: str, attrs: Mapping[str, str | None] | None) -> dict[str, str | None]:
    """Reduce frontend attributes to those that affect the build result.

    Rules are checked in order per entry, the first match decides:
    1. None values are dropped.
    2. Control args (build-arg:BUILDKIT_*) are dropped.
    3. build-arg:* and label:* are kept unchanged.
    4. context:* is kept; with a platform in the metadata key, only entries
       ending in "::<platform>" are kept and the suffix is stripped from
       both key and value.
    5. Anything else is kept only if it is one of KNOWN_ATTRS.

    Args:
        key: Metadata key, used for platform scoping.
        attrs: Raw frontend attributes.

    Returns:
        New mapping with the surviving attributes.
    """
    platform = platform_from_key(key)
    platform_suffix = PLATFORM_SEPARATOR + platform if platform else ""

    filtered: dict[str, str | None] = {}
    for attr_key, value in (attrs or {}).items():
        if value is None:
            continue
        if is_control_arg(attr_key):
            continue
        if attr_key.startswith((BUILD_ARG_PREFIX, LABEL_PREFIX)):
            filtered[attr_key] = value
            continue
        if attr_key.startswith(CONTEXT_PREFIX):
            if platform:
                if not attr_key.endswith(platform_suffix):
                    continue
                filtered[_strip_suffix(attr_key, platform_suffix)] = _strip_suffix(value, platform_suffix)
                continue
            filtered[attr_key] = value
            continue
        if attr_key in KNOWN_ATTRS:
            filtered[attr_key] = value
    return filtered

"""Container image reference parsing and normalization.

Implements the familiar-name normalization used by container tooling:

    alpine               -> docker.io/library/alpine
    user/app:1.0         -> docker.io/user/app:1.0
    index.docker.io/x/y  -> docker.io/x/y
    ghcr.io/org/app@sha256:... (unchanged)

Grammar (simplified, IPv6 domains not supported):
    reference  := name [ ":" tag ] [ "@" digest ]
    name       := [ domain "/" ] path-component [ "/" path-component ]*
    domain     := domain-component [ "." domain-component ]* [ ":" port ]
    tag        := [\\w][\\w.-]{0,127}
    digest     := algorithm ":" hex{32,}
"""

from __future__ import annotations

__all__ = [
    "Reference",
    "parse_normalized_named",
    "tag_name_only",
]

import re
from dataclasses import dataclass, replace

from buildinfo.constants import (
    DEFAULT_DOMAIN,
    DEFAULT_TAG,
    LEGACY_DEFAULT_DOMAIN,
    OFFICIAL_REPO_PREFIX,
)
from buildinfo.exceptions import ParseError

# Max length of the name part (domain + path)
NAME_TOTAL_LENGTH_MAX = 255

_ALPHANUMERIC = r"[a-z0-9]+"
_SEPARATOR = r"(?:[._]|__|[-]+)"
_PATH_COMPONENT = rf"{_ALPHANUMERIC}(?:{_SEPARATOR}{_ALPHANUMERIC})*"
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = rf"{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*(?::[0-9]+)?"
_TAG = r"[\w][\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}"

_REFERENCE_RE = re.compile(
    rf"^(?P<name>(?:(?P<domain>{_DOMAIN})/)?(?P<path>{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*))"
    rf"(?::(?P<tag>{_TAG}))?"
    rf"(?:@(?P<digest>{_DIGEST}))?$"
)
_ANCHORED_IDENTIFIER_RE = re.compile(r"^[a-f0-9]{64}$")


@dataclass(frozen=True)
class Reference:
    """Parsed, fully-qualified image reference."""

    domain: str
    path: str
    tag: str = ""
    digest: str = ""

    @property
    def name(self) -> str:
        """Repository name including domain, without tag or digest."""
        return f"{self.domain}/{self.path}"

    def __str__(self) -> str:
        result = self.name
        if self.tag:
            result += f":{self.tag}"
        if self.digest:
            result += f"@{self.digest}"
        return result


def _split_docker_domain(name: str) -> tuple[str, str]:
    """Split a raw name into (domain, remainder), applying docker.io defaults."""
    i = name.find("/")
    if i == -1 or (
        not any(c in name[:i] for c in ".:") and name[:i] != "localhost" and name[:i].lower() == name[:i]
    ):
        domain, remainder = DEFAULT_DOMAIN, name
    else:
        domain, remainder = name[:i], name[i + 1 :]

    if domain == LEGACY_DEFAULT_DOMAIN:
        domain = DEFAULT_DOMAIN
    if domain == DEFAULT_DOMAIN and "/" not in remainder:
        remainder = OFFICIAL_REPO_PREFIX + remainder
    return domain, remainder


def parse_normalized_named(value: str) -> Reference:
    """Parse a familiar image reference into a fully-qualified one.

    Args:
        value: Reference as a user would write it, e.g. "alpine:3.19".

    Returns:
        Reference with domain and path normalized. Tag/digest are kept as given.

    Raises:
        ParseError: If the reference is malformed.
    """
    if not value:
        raise ParseError(value, "repository name must have at least one component")
    if _ANCHORED_IDENTIFIER_RE.match(value):
        raise ParseError(value, "cannot specify 64-byte hexadecimal strings")

    domain, remainder = _split_docker_domain(value)

    remote_name = remainder.split("@", 1)[0].split(":", 1)[0]
    if remote_name.lower() != remote_name:
        raise ParseError(value, "repository name must be lowercase")

    match = _REFERENCE_RE.match(f"{domain}/{remainder}")
    if match is None:
        raise ParseError(value, "invalid reference format")
    if len(match.group("name")) > NAME_TOTAL_LENGTH_MAX:
        raise ParseError(value, f"repository name must not be more than {NAME_TOTAL_LENGTH_MAX} characters")

    return Reference(
        domain=match.group("domain") or domain,
        path=match.group("path"),
        tag=match.group("tag") or "",
        digest=match.group("digest") or "",
    )


def tag_name_only(ref: Reference) -> Reference:
    """Add the default tag if the reference has neither tag nor digest."""
    if ref.tag or ref.digest:
        return ref
    return replace(ref, tag=DEFAULT_TAG)

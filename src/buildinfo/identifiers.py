"""Build-source identifier parsing.

The builder reports every resolved source as "<scheme>://<rest>" together
with its pin. This module turns those strings into typed identifiers:

    docker-image://alpine          -> ImageIdentifier(docker.io/library/alpine:latest)
    git://github.com/o/r.git#v1:d  -> GitIdentifier(https://github.com/o/r.git, v1, d)
    https://example.com/f.tgz      -> HTTPIdentifier(https://example.com/f.tgz)
    local://context                -> LocalIdentifier(context)
    oci-layout://store/app:1       -> OCIIdentifier(store/app:1)

Only image, git and http identifiers are recorded as sources; the others
are recognized so callers can skip them without treating them as errors.
"""

from __future__ import annotations

__all__ = [
    "GitIdentifier",
    "HTTPIdentifier",
    "Identifier",
    "ImageIdentifier",
    "LocalIdentifier",
    "OCIIdentifier",
    "parse_identifier",
]

from dataclasses import dataclass
from typing import Union
from urllib.parse import urlsplit, urlunsplit

from buildinfo.exceptions import ParseError
from buildinfo.reference import Reference, parse_normalized_named, tag_name_only

DOCKER_IMAGE_SCHEME = "docker-image"
GIT_SCHEME = "git"
LOCAL_SCHEME = "local"
HTTP_SCHEME = "http"
HTTPS_SCHEME = "https"
OCI_SCHEME = "oci-layout"

# Remotes starting with one of these are already complete git URLs
_GIT_TRANSPORT_PREFIXES: tuple[str, ...] = ("http://", "https://", "git://", "ssh://", "git@")


@dataclass(frozen=True)
class ImageIdentifier:
    """Container image, normalized and defaulted to the "latest" tag."""

    reference: Reference


@dataclass(frozen=True)
class GitIdentifier:
    """Git repository at an optional ref and subdirectory."""

    remote: str
    ref: str = ""
    subdir: str = ""


@dataclass(frozen=True)
class HTTPIdentifier:
    """Remote file fetched over HTTP(S)."""

    url: str


@dataclass(frozen=True)
class LocalIdentifier:
    """Client-side local context; never recorded as a source."""

    name: str


@dataclass(frozen=True)
class OCIIdentifier:
    """Image from a local OCI layout store; never recorded as a source."""

    reference: str


Identifier = Union[ImageIdentifier, GitIdentifier, HTTPIdentifier, LocalIdentifier, OCIIdentifier]


def _split_ref_and_subdir(fragment: str) -> tuple[str, str]:
    ref, _, subdir = fragment.partition(":")
    return ref, subdir


def _parse_git(value: str, remote: str) -> GitIdentifier:
    if not remote.startswith(_GIT_TRANSPORT_PREFIXES):
        remote = "https://" + remote

    # scp-like "git@host:path" is not a URL
    if remote.startswith("git@"):
        remote, _, fragment = remote.partition("#")
        ref, subdir = _split_ref_and_subdir(fragment)
        return GitIdentifier(remote=remote, ref=ref, subdir=subdir)

    try:
        parts = urlsplit(remote)
    except ValueError as e:
        raise ParseError(value, str(e)) from e
    if not parts.netloc:
        raise ParseError(value, "missing git remote host")

    ref, subdir = _split_ref_and_subdir(parts.fragment)
    remote = urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))
    return GitIdentifier(remote=remote, ref=ref, subdir=subdir)


def parse_identifier(value: str) -> Identifier:
    """Parse a raw build-source string into a typed identifier.

    Args:
        value: Identifier string as reported by the builder.

    Returns:
        The typed identifier.

    Raises:
        ParseError: If the string has no scheme, an unknown scheme, or a
            malformed payload (e.g. an invalid image reference).
    """
    scheme, sep, rest = value.partition("://")
    if not sep:
        raise ParseError(value, "invalid identifier")

    if scheme == DOCKER_IMAGE_SCHEME:
        return ImageIdentifier(reference=tag_name_only(parse_normalized_named(rest)))
    if scheme == GIT_SCHEME:
        return _parse_git(value, rest)
    if scheme == HTTPS_SCHEME:
        return HTTPIdentifier(url=f"https://{rest}")
    if scheme == HTTP_SCHEME:
        return HTTPIdentifier(url=f"http://{rest}")
    if scheme == LOCAL_SCHEME:
        return LocalIdentifier(name=rest)
    if scheme == OCI_SCHEME:
        return OCIIdentifier(reference=rest)
    raise ParseError(value, f"unknown scheme {scheme}")

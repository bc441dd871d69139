"""Record models - WHAT went into a build.

Structure:
- BuildInfo: provenance record for one build step/target
  - frontend: name of the build-definition interpreter
  - attrs: output-relevant frontend options (values may be None)
  - sources: external inputs (images, git repos, HTTP artifacts), sorted by ref
  - deps: nested BuildInfo records recovered from input contexts
- ImageConfig: the slice of an image configuration that embeds a record

Wire format is JSON with empty fields omitted. For embedding (image config,
input-metadata), the JSON is base64 encoded with the standard alphabet.
"""

from __future__ import annotations

__all__ = [
    "BuildInfo",
    "ImageConfig",
    "Source",
    "SourceType",
    "decode_buildinfo",
    "encode_buildinfo",
]

import base64
import binascii
import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from buildinfo.constants import IMAGE_CONFIG_FIELD
from buildinfo.exceptions import DecodeError


class SourceType(str, Enum):
    """Kind of external input consumed by a build."""

    DOCKER_IMAGE = "docker-image"
    GIT = "git"
    HTTP = "http"


class Source(BaseModel):
    """One external input with its canonical reference and pin.

    Attributes:
        type: Kind of source.
        ref: Canonical reference, credential-redacted for git/http.
        alias: Frontend-local name as the user wrote it (images only).
        pin: Immutable content identifier, e.g. an image digest or commit.
    """

    model_config = ConfigDict(frozen=True)

    type: SourceType
    ref: str = ""
    alias: str = ""
    pin: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Wire representation with empty fields omitted."""
        data: dict[str, Any] = {"type": self.type.value}
        if self.ref:
            data["ref"] = self.ref
        if self.alias:
            data["alias"] = self.alias
        if self.pin:
            data["pin"] = self.pin
        return data


class BuildInfo(BaseModel):
    """Provenance record for one build step.

    Empty attrs/deps mappings are normalized to None so that a record and
    its serialized form always compare equal after a round trip.
    """

    frontend: str = ""
    attrs: dict[str, str | None] | None = None
    sources: list[Source] = Field(default_factory=list)
    deps: dict[str, BuildInfo] | None = None

    @field_validator("attrs", "deps", mode="after")
    @classmethod
    def _empty_mapping_is_none(cls, value: dict[str, Any] | None) -> dict[str, Any] | None:
        return value or None

    def to_dict(self) -> dict[str, Any]:
        """Wire representation with empty fields omitted and map keys sorted."""
        data: dict[str, Any] = {}
        if self.frontend:
            data["frontend"] = self.frontend
        if self.attrs:
            data["attrs"] = {k: self.attrs[k] for k in sorted(self.attrs)}
        if self.sources:
            data["sources"] = [src.to_dict() for src in self.sources]
        if self.deps:
            data["deps"] = {k: self.deps[k].to_dict() for k in sorted(self.deps)}
        return data

    def to_json(self) -> bytes:
        """Serialize to compact JSON bytes."""
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_json(cls, data: bytes | str, context: str = "failed to unmarshal build info") -> BuildInfo:
        """Parse a JSON record.

        Args:
            data: JSON bytes or text.
            context: Message prefix used if decoding fails.

        Returns:
            Parsed BuildInfo.

        Raises:
            DecodeError: If data is not valid JSON or does not match the schema.
        """
        try:
            return cls.model_validate(json.loads(data))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise DecodeError(context, e) from e

    def without_attrs(self) -> BuildInfo:
        """Return a copy with attrs removed, for external display."""
        return self.model_copy(update={"attrs": None})


BuildInfo.model_rebuild()


class ImageConfig(BaseModel):
    """Image configuration fields relevant to provenance.

    Any other keys of the image configuration are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    build_info: str = Field(default="", alias=IMAGE_CONFIG_FIELD)


def encode_buildinfo(bi: BuildInfo) -> str:
    """Encode a record as base64 JSON for embedding."""
    return base64.b64encode(bi.to_json()).decode("ascii")


def decode_buildinfo(enc: str, context: str = "failed to decode build info") -> BuildInfo:
    """Decode a base64 JSON record.

    Args:
        enc: Base64 (standard alphabet) encoded JSON.
        context: Message prefix used if decoding fails.

    Returns:
        Decoded BuildInfo.

    Raises:
        DecodeError: If enc is not valid base64 or the payload is not a valid record.
    """
    try:
        raw = base64.b64decode(enc, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(context, e) from e
    return BuildInfo.from_json(raw, context=context)

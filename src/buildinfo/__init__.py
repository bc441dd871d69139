"""buildinfo: build provenance records for multi-platform builds.

Records which external sources (images, git repositories, HTTP artifacts)
and which build parameters contributed to an artifact, plus nested
provenance from input contexts that were themselves built.

Usage:
    from buildinfo import accumulate_request, finalize_with_sources

    record = accumulate_request(None, "meta/linux/amd64", "dockerfile.v0", attrs)
    record = finalize_with_sources(record, "meta/linux/amd64", build_sources)
"""

__version__ = "0.1.0"

from buildinfo.attrs import filter_attrs
from buildinfo.deps import decode_deps
from buildinfo.exceptions import BuildInfoError, DecodeError, ParseError
from buildinfo.metadata import (
    FormatOpts,
    accumulate_request,
    encode,
    finalize_with_sources,
    format_buildinfo,
    from_image_config,
    get_metadata,
)
from buildinfo.models import BuildInfo, ImageConfig, Source, SourceType, decode_buildinfo, encode_buildinfo
from buildinfo.sources import merge_sources

__all__ = [
    "BuildInfo",
    "BuildInfoError",
    "DecodeError",
    "FormatOpts",
    "ImageConfig",
    "ParseError",
    "Source",
    "SourceType",
    "__version__",
    "accumulate_request",
    "decode_buildinfo",
    "decode_deps",
    "encode",
    "encode_buildinfo",
    "filter_attrs",
    "finalize_with_sources",
    "format_buildinfo",
    "from_image_config",
    "get_metadata",
    "merge_sources",
]

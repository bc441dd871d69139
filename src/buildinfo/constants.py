"""Application-wide constants for buildinfo.

Fixed tables that decide which build attributes survive into a provenance
record, plus the well-known keys used on the wire.
For user-configurable settings, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    "CONFIG_ENV_VAR",
    # Wire keys
    "EXPORTER_BUILD_INFO",
    "IMAGE_CONFIG_FIELD",
    # Attribute namespaces
    "BUILD_ARG_PREFIX",
    "LABEL_PREFIX",
    "CONTEXT_PREFIX",
    "INPUT_METADATA_PREFIX",
    "PLATFORM_SEPARATOR",
    # Attribute filtering tables
    "KNOWN_ATTRS",
    "KNOWN_CONTROL_ARGS",
    # Reference normalization
    "DEFAULT_DOMAIN",
    "LEGACY_DEFAULT_DOMAIN",
    "OFFICIAL_REPO_PREFIX",
    "DEFAULT_TAG",
    # Credential redaction
    "REDACTED_PASSWORD",
]

# =============================================================================
# Application identity
# =============================================================================

APP_NAME = "buildinfo"

# Overrides the default config file location
CONFIG_ENV_VAR = "BUILDINFO_CONFIG"

# =============================================================================
# Wire keys
# =============================================================================

# Key of the base64 record inside an input-metadata exporter response
EXPORTER_BUILD_INFO = "containerimage.buildinfo"

# Image configuration field carrying an embedded base64 record
IMAGE_CONFIG_FIELD = "moby.buildkit.buildinfo.v1"

# =============================================================================
# Attribute namespaces
# =============================================================================

BUILD_ARG_PREFIX = "build-arg:"
LABEL_PREFIX = "label:"
CONTEXT_PREFIX = "context:"
INPUT_METADATA_PREFIX = "input-metadata:"

# Separates a context/input name from its target platform: "context:base::linux/amd64"
PLATFORM_SEPARATOR = "::"

# =============================================================================
# Attribute filtering tables
# =============================================================================

# Bare frontend options that can change the build result.
# cmdline, add-hosts, cgroup-parent, force-network-mode, hostname,
# image-resolve-mode and platform are deliberately absent.
KNOWN_ATTRS: frozenset[str] = frozenset(
    {
        "context",
        "filename",
        "source",
        "shm-size",
        "target",
        "ulimit",
    }
)

# Build args that toggle builder behavior without touching the output.
# Matched as prefixes after "build-arg:".
KNOWN_CONTROL_ARGS: tuple[str, ...] = (
    "BUILDKIT_CACHE_MOUNT_NS",
    "BUILDKIT_CONTEXT_KEEP_GIT_DIR",
    "BUILDKIT_INLINE_BUILDINFO_ATTRS",
    "BUILDKIT_INLINE_CACHE",
    "BUILDKIT_MULTI_PLATFORM",
    "BUILDKIT_SANDBOX_HOSTNAME",
    "BUILDKIT_SYNTAX",
)

# =============================================================================
# Reference normalization
# =============================================================================

DEFAULT_DOMAIN = "docker.io"
LEGACY_DEFAULT_DOMAIN = "index.docker.io"
OFFICIAL_REPO_PREFIX = "library/"
DEFAULT_TAG = "latest"

# =============================================================================
# Credential redaction
# =============================================================================

REDACTED_PASSWORD = "xxxxx"

"""Custom exceptions for buildinfo.

All errors raised by the merge/filter engine derive from BuildInfoError.
Both concrete kinds are fatal for the operation that raised them: nothing
is retried and no partial record is produced.

    - ParseError: A build-source identifier or image reference is malformed
    - DecodeError: JSON or base64 could not be decoded at some boundary

Both also subclass ValueError so callers that only care about "bad input"
can catch that.

Usage:
    from buildinfo.exceptions import DecodeError, ParseError
"""

from __future__ import annotations

__all__ = [
    "BuildInfoError",
    "DecodeError",
    "ParseError",
]


class BuildInfoError(Exception):
    """Base exception for all buildinfo failures."""


class ParseError(BuildInfoError, ValueError):
    """A build-source identifier or image reference could not be parsed.

    Attributes:
        value: The offending identifier or reference string.
        reason: Short description of what was wrong with it.
    """

    def __init__(self, value: str, reason: str | None = None) -> None:
        """Initialize ParseError.

        Args:
            value: The string that failed to parse.
            reason: Optional detail appended to the message.
        """
        self.value = value
        self.reason = reason
        message = f"failed to parse {value}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"ParseError({self.value!r}, reason={self.reason!r})"


class DecodeError(BuildInfoError, ValueError):
    """JSON or base64 payload could not be decoded.

    The underlying exception (json.JSONDecodeError, binascii.Error,
    pydantic.ValidationError) is chained as __cause__.

    Attributes:
        context: Where decoding failed, e.g. "failed to unmarshal input-metadata".
    """

    def __init__(self, context: str, cause: BaseException | None = None) -> None:
        """Initialize DecodeError.

        Args:
            context: Human-readable description of the decode boundary.
            cause: The original decode failure, included in the message.
        """
        self.context = context
        message = f"{context}: {cause}" if cause is not None else context
        super().__init__(message)

"""Log formatting utilities.

Log messages are dicts with an "event" key, e.g.
    logger.debug({"event": "source_skipped", "identifier": "local://context"})

- ISO8601Formatter: one JSON object per line with a UTC timestamp (log files)
- ConsoleFormatter: "LEVEL: event key=value ..." (stderr)
"""

from __future__ import annotations

__all__ = ["ConsoleFormatter", "ISO8601Formatter"]

import json
import logging
from datetime import datetime, timezone


def _record_data(record: logging.LogRecord) -> dict:
    if isinstance(record.msg, dict):
        return record.msg
    return {"message": record.getMessage()}


class ISO8601Formatter(logging.Formatter):
    """Custom formatter with ISO 8601 timestamps (UTC) for JSONL output.

    Format: YYYY-MM-DDTHH:MM:SS.sssZ
    Example: 2025-12-04T10:48:37.123Z
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSONL with ISO 8601 timestamp."""
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )
        log_entry = {"time": timestamp, "level": record.levelname, "logger": record.name, **_record_data(record)}
        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output."""
        data = dict(_record_data(record))
        msg = data.pop("message", None) or data.pop("event", "")
        details = " ".join(f"{k}={v}" for k, v in data.items())
        return f"{record.levelname}: {msg} {details}".rstrip()

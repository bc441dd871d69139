"""Logging utilities.

This package provides logging infrastructure for buildinfo:
- iso_formatter: ISO 8601 timestamp formatting for JSONL logs, console formatter
- logger_setup: Wiring of stderr and optional JSONL file handlers

Import directly from submodules:
    from buildinfo.utils.logging.logger_setup import setup_logging
"""

__all__: list[str] = []  # Direct submodule imports required (see docstring)

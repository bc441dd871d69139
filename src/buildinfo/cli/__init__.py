"""Command-line interface for buildinfo.

Provides commands for accumulating provenance records into a record store
and for inspecting records, image configurations and attribute filtering.
"""

from .main import cli, main

__all__ = ["cli", "main"]

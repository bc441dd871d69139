"""Terminal styling for buildinfo command output.

Record commands report success and failure on one line each; the config
group prints a short sectioned summary. Colors are dropped by click when
output is not a terminal.
"""

from __future__ import annotations

__all__ = [
    "style_dim",
    "style_error",
    "style_header",
    "style_success",
]

import click


def style_header(title: str) -> str:
    """Section title for `config show`, e.g. "--- Logging ---"."""
    return click.style(f"--- {title} ---", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Green confirmation line, e.g. "✓ Record finalized: meta"."""
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    """Red failure line, meant for stderr before exiting 1."""
    return click.style(f"✗ {message}", fg="red")


def style_dim(message: str) -> str:
    return click.style(message, dim=True)

"""Shared utilities for buildinfo (file handling, logging setup)."""

"""CLI subcommands for buildinfo."""

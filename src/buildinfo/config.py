"""Application configuration for buildinfo.

The engine itself has no tunables; configuration only covers how the CLI
logs. Config is stored at the OS-appropriate location (via
click.get_app_dir) unless BUILDINFO_CONFIG points elsewhere. A missing
file at the default location means "use defaults".

Example usage:
    config = AppConfig.load_from_files(get_config_path())
    setup_logging(config.logging)
"""

from __future__ import annotations

__all__ = [
    "AppConfig",
    "LoggingConfig",
    "get_config_path",
]

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from buildinfo.constants import CONFIG_ENV_VAR
from buildinfo.utils.file_helpers import get_app_dir, load_validated_json, require_file_exists


def get_config_path() -> Path:
    """Return the config file path, honoring BUILDINFO_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_app_dir() / "config.json"


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Attributes:
        log_level: Minimum level written to stderr and the log file.
        log_file: Optional JSONL log file. Parent directory is created on setup.
    """

    log_level: Literal["DEBUG", "INFO", "WARNING"] = "WARNING"
    log_file: str | None = Field(default=None, min_length=1)


class AppConfig(BaseModel):
    """Top-level configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file, creating parent directories."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)

    @classmethod
    def load_from_files(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config JSON file.

        Returns:
            AppConfig instance with loaded configuration.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If config file is invalid.
        """
        require_file_exists(config_path, file_type="configuration")
        return load_validated_json(
            config_path,
            cls,
            file_type="config",
            recovery_hint="Run 'buildinfo config init' to write a default config.",
            encoding="utf-8",
        )

    @classmethod
    def load_or_default(cls, config_path: Path | None = None) -> "AppConfig":
        """Load configuration, falling back to defaults if the file is missing.

        An explicitly configured path (argument or BUILDINFO_CONFIG) must exist.

        Raises:
            FileNotFoundError: If an explicit config path doesn't exist.
            ValueError: If config file is invalid.
        """
        if config_path is None and not os.environ.get(CONFIG_ENV_VAR):
            default_path = get_config_path()
            if not default_path.exists():
                return cls()
            return cls.load_from_files(default_path)
        return cls.load_from_files(config_path or get_config_path())

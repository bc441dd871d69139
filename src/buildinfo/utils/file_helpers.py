"""Shared file utilities for buildinfo.

Provides common utilities used by config loading and the CLI record store:
- get_app_dir: OS-appropriate application directory
- require_file_exists: Friendly FileNotFoundError
- load_validated_json: JSON + Pydantic validation with readable errors
- load_record_store / save_record_store: metadata key -> record JSON file
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import TypeVar

import click
from pydantic import BaseModel, ValidationError

from buildinfo.constants import APP_NAME

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)

__all__ = [
    # App directory
    "get_app_dir",
    # File operations
    "require_file_exists",
    "load_validated_json",
    # Record store
    "load_record_store",
    "save_record_store",
]


def get_app_dir() -> Path:
    """Get the OS-appropriate application directory.

    Uses click.get_app_dir() which returns:
    - macOS: ~/Library/Application Support/buildinfo
    - Linux: ~/.config/buildinfo (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\buildinfo

    Returns:
        Path to the application directory.
    """
    return Path(click.get_app_dir(APP_NAME))


def require_file_exists(
    file_path: Path,
    file_type: str = "file",
) -> None:
    """Raise FileNotFoundError with helpful message if file doesn't exist.

    Args:
        file_path: Path to check.
        file_type: Description for error message (e.g., "configuration", "record store").

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    if file_path.exists():
        return
    raise FileNotFoundError(f"{file_type.capitalize()} file not found at {file_path}.")


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
    recovery_hint: str | None = None,
    encoding: str | None = None,
) -> T:
    """Load JSON file and validate against Pydantic model.

    Combines file reading, JSON parsing, and Pydantic validation with
    consistent error messages.

    Args:
        file_path: Path to JSON file.
        model_class: Pydantic model class to validate against.
        file_type: Description for error messages (e.g., "config").
        recovery_hint: Optional hint appended to validation errors.
        encoding: File encoding. If None, uses system default.

    Returns:
        Validated Pydantic model instance.

    Raises:
        ValueError: If JSON is invalid or validation fails.
    """
    try:
        with open(file_path, "r", encoding=encoding) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")

        hint = f"\n\n{recovery_hint}" if recovery_hint else ""
        raise ValueError(
            f"Invalid {file_type} configuration in {file_path}:\n" + "\n".join(errors) + hint
        ) from e


def load_record_store(path: Path) -> dict[str, bytes]:
    """Load a record store: a JSON object of metadata key -> record.

    A missing file is an empty store.

    Args:
        path: Store file path.

    Returns:
        Mapping of metadata key to record JSON bytes, the shape the
        accumulator expects.

    Raises:
        ValueError: If the file is not a JSON object of objects.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in record store {path}: {e}") from e

    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise ValueError(f"Record store {path} must map metadata keys to record objects")
    return {key: json.dumps(record).encode("utf-8") for key, record in data.items()}


def save_record_store(path: Path, store: dict[str, bytes]) -> None:
    """Write a record store atomically.

    Args:
        path: Store file path. Parent directories are created.
        store: Mapping of metadata key to record JSON bytes.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {key: json.loads(store[key]) for key in sorted(store)}
    content = json.dumps(data, indent=2) + "\n"

    # Atomic write: temp file in the same directory, then rename
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".records_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise

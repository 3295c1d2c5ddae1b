"""JSON file reading shared by the content libraries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from dnd_engine.core.exceptions import ContentError


def read_json(path: Path) -> Any:
    """Read and decode a JSON file.

    Raises:
        ContentError: If the file is missing, unreadable or not valid JSON.
    """
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise ContentError("Content file not found", source_file=str(path)) from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ContentError(f"Failed to read content file: {exc}", source_file=str(path)) from exc


def json_files(directory: Path) -> list[Path]:
    """List ``*.json`` files in a directory, sorted by name; empty if absent."""
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.suffix == ".json" and p.is_file())


__all__ = ["read_json", "json_files"]

"""Map files, served to clients as-is.

The engine never interprets map contents; the gateway only lists them and
hands them out by id.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from dnd_engine.content.loader import json_files, read_json
from dnd_engine.core.exceptions import ContentError
from dnd_engine.core.logging import get_logger


logger = get_logger(__name__)


class MapLibrary:
    """Read-only access to the maps directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def list_maps(self) -> list[dict[str, Any]]:
        """``{id, name}`` of every readable map file; id defaults to the file stem."""
        maps = []
        for path in json_files(self.directory):
            try:
                data = read_json(path)
            except ContentError as exc:
                logger.warning("Failed to load map", error=str(exc))
                continue
            if isinstance(data, dict):
                maps.append({"id": data.get("id", path.stem), "name": data.get("name", path.stem)})
        return maps

    def get_map(self, map_id: str) -> dict[str, Any] | None:
        """Return the raw map document, or None."""
        path = self.directory / f"{map_id}.json"
        if path.parent.resolve() != self.directory.resolve() or not path.is_file():
            return None
        try:
            data = read_json(path)
        except ContentError as exc:
            logger.warning("Failed to load map", error=str(exc))
            return None
        return data if isinstance(data, dict) else None


__all__ = ["MapLibrary"]

"""Dialogue file registry.

All dialogue files are read once, when the library is built, and indexed
by their ``id`` field. Files without an id or that fail validation are
skipped with a warning.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from dnd_engine.content.loader import json_files, read_json
from dnd_engine.core.exceptions import ContentError
from dnd_engine.core.logging import get_logger
from dnd_engine.models.dialogue import DialogueFile


logger = get_logger(__name__)


class DialogueLibrary:
    """In-memory index of dialogue files."""

    def __init__(self, dialogues: dict[str, DialogueFile] | None = None) -> None:
        self._dialogues: dict[str, DialogueFile] = dict(dialogues or {})

    @classmethod
    def from_directory(cls, directory: Path) -> "DialogueLibrary":
        """Load every ``*.json`` file in a directory."""
        if not directory.is_dir():
            logger.warning("Dialogues directory not found", directory=str(directory))
            return cls()

        dialogues: dict[str, DialogueFile] = {}
        for path in json_files(directory):
            try:
                dialogue = DialogueFile.model_validate(read_json(path))
            except ContentError as exc:
                logger.warning("Failed to load dialogue", error=str(exc))
                continue
            except PydanticValidationError as exc:
                logger.warning("Invalid dialogue file", source_file=str(path), errors=exc.error_count())
                continue
            dialogues[dialogue.id] = dialogue

        logger.info("Dialogues loaded", directory=str(directory), count=len(dialogues))
        return cls(dialogues)

    def __len__(self) -> int:
        return len(self._dialogues)

    def get_dialogue(self, dialogue_id: str) -> DialogueFile | None:
        """Return a dialogue file by id, or None."""
        return self._dialogues.get(dialogue_id)

    def dialogues_for_campaign(self, campaign_id: str) -> list[dict[str, Any]]:
        """Summaries of the dialogue files attached to a campaign.

        Returns:
            ``[{"id": ..., "conversations": [{"id": ..., "name": ...}]}]``
        """
        return [
            {
                "id": dialogue.id,
                "conversations": [
                    {"id": conversation.id, "name": conversation.name}
                    for conversation in dialogue.dialogues
                ],
            }
            for dialogue in self._dialogues.values()
            if dialogue.campaign_id == campaign_id
        ]


__all__ = ["DialogueLibrary"]

"""Read-only content consumed by the engine: rules, campaigns, dialogues, maps.

Example:
    >>> from dnd_engine.content import ContentLibrary
    >>> content = ContentLibrary.from_settings(get_settings().content)
    >>> content.rules.monsters["orc"].armor_class
    13
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from dnd_engine.content.campaigns import CampaignLibrary
from dnd_engine.content.dialogues import DialogueLibrary
from dnd_engine.content.maps import MapLibrary
from dnd_engine.content.rules import load_rule_tables
from dnd_engine.core.config import ContentSettings
from dnd_engine.models.rules import RuleTables


@dataclass
class ContentLibrary:
    """Bundle of every read-only content source."""

    rules: RuleTables = field(default_factory=RuleTables)
    campaigns: CampaignLibrary = field(default_factory=lambda: CampaignLibrary(Path("campaigns")))
    dialogues: DialogueLibrary = field(default_factory=DialogueLibrary)
    maps: MapLibrary = field(default_factory=lambda: MapLibrary(Path("maps")))

    @classmethod
    def from_settings(cls, settings: ContentSettings) -> "ContentLibrary":
        """Load all content from the configured directories."""
        return cls(
            rules=load_rule_tables(settings.rules_path),
            campaigns=CampaignLibrary(settings.campaigns_path),
            dialogues=DialogueLibrary.from_directory(settings.dialogues_path),
            maps=MapLibrary(settings.maps_path),
        )


__all__ = [
    "ContentLibrary",
    "CampaignLibrary",
    "DialogueLibrary",
    "MapLibrary",
    "load_rule_tables",
]

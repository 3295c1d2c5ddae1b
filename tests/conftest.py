"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the dnd-engine test suite.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from dnd_engine.engine.dice import DiceRoller


if TYPE_CHECKING:
    from collections.abc import Generator

    from dnd_engine.content import ContentLibrary
    from dnd_engine.engine.controller import GameEngine
    from dnd_engine.engine.registry import GameRegistry
    from dnd_engine.models.rules import RuleTables


# =============================================================================
# Dice
# =============================================================================


class ScriptedRoller(DiceRoller):
    """DiceRoller that returns queued values instead of random ones.

    Every die, including those rolled for a notation, takes the next
    queued value. Running out of values fails the test loudly.
    """

    def __init__(self, values: Iterable[int] = ()) -> None:
        super().__init__()
        self.values = list(values)
        self.requested: list[int] = []

    def queue(self, *values: int) -> None:
        self.values.extend(values)

    def roll_die(self, sides: int = 20) -> int:
        self.requested.append(sides)
        if not self.values:
            raise AssertionError(f"ScriptedRoller ran out of values (d{sides} requested)")
        return self.values.pop(0)


@pytest.fixture
def roller() -> ScriptedRoller:
    """Provide an empty ScriptedRoller; tests queue the values they need."""
    return ScriptedRoller()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dnd_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Rule Fixtures
# =============================================================================


RULES_DATA: dict[str, Any] = {
    "classes": {
        "fighter": {"hitDie": 10, "savingThrows": {"deathRay": 12, "wands": 13}},
        "wizard": {"hitDie": 4},
    },
    "spells": {
        "cleric": {
            "1": [
                {"name": "Cure Light Wounds", "effect": {"heal": "1d8"}},
                {"name": "Light", "effect": {}},
            ],
        },
        "magicUser": {
            "1": [
                {"name": "Magic Missile", "effect": {"damage": "1d6+1"}},
                {"name": "Light", "effect": {"damage": "1d4"}},
            ],
        },
    },
    "monsters": {
        "orc": {
            "armorClass": 13,
            "hitDice": 1,
            "attacks": [{"name": "axe", "damage": "1d8"}],
        },
        "troll": {"armorClass": 15, "hitPoints": 30, "attacks": []},
        "slime": {"hitDice": 2, "attacks": [{"name": "ooze", "damage": "gooey"}]},
    },
    "items": {
        "potion_healing": {"name": "Potion of Healing", "effect": {"heal": "1d8"}},
        "shield": {"name": "Shield", "effect": {"acBonus": 1}},
        "rope": {"name": "Rope"},
    },
}


@pytest.fixture
def rules_dir(tmp_path: Path) -> Path:
    """Write the sample rule tables to a temporary directory."""
    directory = tmp_path / "rules"
    directory.mkdir()
    for table, data in RULES_DATA.items():
        (directory / f"{table}.json").write_text(json.dumps(data), encoding="utf-8")
    return directory


@pytest.fixture
def rules(rules_dir: Path) -> RuleTables:
    """Load the sample rule tables."""
    from dnd_engine.content.rules import load_rule_tables

    return load_rule_tables(rules_dir)


# =============================================================================
# Content Fixtures
# =============================================================================


DIALOGUE_DATA: dict[str, Any] = {
    "id": "tavern",
    "campaignId": "lost_mine",
    "dialogues": [
        {
            "id": "barkeep",
            "name": "The Barkeep",
            "start": "greet",
            "nodes": {
                "greet": {
                    "text": "What'll it be?",
                    "options": [
                        {"text": "Any rumours?", "next": "rumour"},
                        {"text": "Nothing, thanks."},
                    ],
                },
                "rumour": {
                    "text": "Goblins on the road. Deal with them and I'll pay.",
                    "options": [
                        {
                            "text": "Deal.",
                            "next": "paid",
                            "reward": {"xp": 1200, "items": ["potion_healing", "rope"]},
                        },
                        {"text": "Where exactly?", "next": "missing_node"},
                    ],
                },
                "paid": {"text": "Off you go, then.", "options": []},
            },
        }
    ],
}


@pytest.fixture
def content_dir(tmp_path: Path, rules_dir: Path) -> Path:
    """Create rules, campaigns, dialogues and maps under one directory."""
    campaigns = tmp_path / "campaigns"
    campaigns.mkdir()
    (campaigns / "lost_mine.json").write_text(
        json.dumps(
            {
                "id": "lost_mine",
                "name": "Lost Mine",
                "description": "Goblins and a forgotten mine.",
                "chapters": ["road", "mine"],
            }
        ),
        encoding="utf-8",
    )
    (campaigns / "broken.json").write_text("{not json", encoding="utf-8")

    dialogues = tmp_path / "dialogues"
    dialogues.mkdir()
    (dialogues / "tavern.json").write_text(json.dumps(DIALOGUE_DATA), encoding="utf-8")

    maps = tmp_path / "maps"
    maps.mkdir()
    (maps / "road.json").write_text(
        json.dumps({"id": "road", "name": "Triboar Trail", "tiles": [[0, 1], [1, 0]]}),
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def content_settings(content_dir: Path) -> Any:
    """ContentSettings pointing at the temporary content directories."""
    from dnd_engine.core.config import ContentSettings

    return ContentSettings(
        rules_path=content_dir / "rules",
        campaigns_path=content_dir / "campaigns",
        dialogues_path=content_dir / "dialogues",
        maps_path=content_dir / "maps",
    )


@pytest.fixture
def content(content_settings: Any) -> ContentLibrary:
    """Load the full content library from the temporary directories."""
    from dnd_engine.content import ContentLibrary

    return ContentLibrary.from_settings(content_settings)


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def registry() -> GameRegistry:
    """Create an empty GameRegistry."""
    from dnd_engine.engine.registry import GameRegistry

    return GameRegistry()


@pytest.fixture
def engine(registry: GameRegistry, content: ContentLibrary, roller: ScriptedRoller) -> GameEngine:
    """Create a GameEngine over the sample content with a scripted roller."""
    from dnd_engine.engine.controller import GameEngine

    return GameEngine(registry=registry, content=content, roller=roller)


@pytest.fixture
def party(registry: GameRegistry) -> GameRegistry:
    """Game "g1" with Rowan (p1, 10 hp, ac 12) and Mira (p2, 6 hp, ac 10)."""
    registry.add_player("g1", "p1", "Rowan")
    registry.add_player("g1", "p2", "Mira")
    registry.set_character("g1", "p1", {"name": "Rowan", "class": "fighter", "hp": 10, "ac": 12})
    registry.set_character("g1", "p2", {"name": "Mira", "class": "cleric", "hp": 6})
    return registry

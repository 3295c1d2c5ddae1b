"""Live game state models.

These models are owned exclusively by the GameRegistry. Engine functions
fetch them from the registry, mutate them in place, and hand detached
snapshots (``model_dump``) to callers.

Models:
    AbilityScores: The six ability scores of a character.
    Character: Role-play statistics attached to a player.
    Player: A connected participant in a game.
    MonsterInstance: A spawned occurrence of a monster rule.
    Game: One isolated play session.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import ConfigDict, Field

from dnd_engine.core.constants import (
    DEFAULT_ABILITY_SCORE,
    DEFAULT_ARMOR_CLASS,
    MIN_CHARACTER_LEVEL,
    STATUS_UNCONSCIOUS,
)
from dnd_engine.models.base import WireModel
from dnd_engine.models.campaign import Campaign


# =============================================================================
# Characters
# =============================================================================


class AbilityScores(WireModel):
    """The six ability scores, keyed by their three-letter abbreviations."""

    strength: int = Field(default=DEFAULT_ABILITY_SCORE, alias="str")
    dexterity: int = Field(default=DEFAULT_ABILITY_SCORE, alias="dex")
    constitution: int = Field(default=DEFAULT_ABILITY_SCORE, alias="con")
    intelligence: int = Field(default=DEFAULT_ABILITY_SCORE, alias="int")
    wisdom: int = Field(default=DEFAULT_ABILITY_SCORE, alias="wis")
    charisma: int = Field(default=DEFAULT_ABILITY_SCORE, alias="cha")


class Character(WireModel):
    """Role-play statistics attached to a player.

    Hit points may go to zero or below; ``hp`` is ``None`` only for a
    character that never had hit points assigned (for example one created
    implicitly by receiving an item). Client-supplied fields outside this
    schema are preserved.

    Attributes:
        name: Character name.
        race: Character race.
        character_class: Class key (``class`` on the wire).
        hp: Current hit points.
        ac: Armour class.
        ability_scores: The six ability scores.
        saving_throws: Named saving throw thresholds.
        experience: Experience carried toward the next level.
        level: Character level.
        inventory: Item identifiers, ordered, duplicates allowed.
        status: Free-form status tag, e.g. "unconscious".
    """

    model_config = ConfigDict(extra="allow")

    name: str = ""
    race: str | None = None
    character_class: str | None = Field(default=None, alias="class")
    hp: int | None = None
    ac: int = DEFAULT_ARMOR_CLASS
    ability_scores: AbilityScores = Field(default_factory=AbilityScores)
    saving_throws: dict[str, int] = Field(default_factory=dict)
    experience: int = Field(default=0, ge=0)
    level: int = Field(default=MIN_CHARACTER_LEVEL, ge=MIN_CHARACTER_LEVEL)
    inventory: list[str] = Field(default_factory=list)
    status: str | None = None

    @property
    def is_conscious(self) -> bool:
        """Whether the character can still be targeted by monsters."""
        if self.status == STATUS_UNCONSCIOUS:
            return False
        return self.hp is None or self.hp > 0

    def apply_damage(self, amount: int) -> int:
        """Subtract damage from hit points and mark unconsciousness.

        A character without hit points is treated as having zero.

        Args:
            amount: Damage to subtract.

        Returns:
            Remaining hit points.
        """
        self.hp = (self.hp or 0) - amount
        if self.hp <= 0:
            self.status = STATUS_UNCONSCIOUS
        return self.hp

    def apply_healing(self, amount: int) -> int:
        """Add healing to hit points. Status is left untouched."""
        self.hp = (self.hp or 0) + amount
        return self.hp


class Player(WireModel):
    """A participant in a game, keyed by its connection identifier."""

    id: str
    name: str
    character: Character | None = None


# =============================================================================
# Monsters
# =============================================================================


class MonsterInstance(WireModel):
    """A spawned, uniquely identified monster within one game.

    Attributes:
        instance_id: Process-unique identifier assigned at spawn.
        type: Key into the monster rule table.
        hp: Current hit points.
        ac: Armour class.
        status: "alive" until hit points reach zero.
    """

    instance_id: str
    type: str
    hp: int
    ac: int = DEFAULT_ARMOR_CLASS
    status: Literal["alive", "dead"] = "alive"

    def apply_damage(self, amount: int) -> int:
        """Subtract damage and mark the monster dead at zero or below."""
        self.hp -= amount
        if self.hp <= 0:
            self.status = "dead"
        return self.hp

    @property
    def is_dead(self) -> bool:
        """Whether hit points have reached zero."""
        return self.status == "dead"


# =============================================================================
# Game
# =============================================================================


class Game(WireModel):
    """One isolated play session with its own players, monsters and log.

    ``players`` keeps join order. ``log`` is append-only.
    """

    model_config = ConfigDict(validate_assignment=False)

    id: str
    players: dict[str, Player] = Field(default_factory=dict)
    monsters: dict[str, MonsterInstance] = Field(default_factory=dict)
    log: list[str] = Field(default_factory=list)
    campaign: Campaign | None = None

    def snapshot(self) -> dict[str, Any]:
        """Return a detached state snapshot suitable for broadcasting.

        Returns:
            Dict with ``id``, ``players``, ``monsters``, ``log`` and
            ``campaign``; players and monsters are lists in insertion order.
        """
        return {
            "id": self.id,
            "players": [player.to_wire() for player in self.players.values()],
            "monsters": [monster.to_wire() for monster in self.monsters.values()],
            "log": list(self.log),
            "campaign": self.campaign.to_wire() if self.campaign else None,
        }


__all__ = [
    "AbilityScores",
    "Character",
    "Player",
    "MonsterInstance",
    "Game",
]

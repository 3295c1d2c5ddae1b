"""Read-only rule table schemas.

Rule files are authored by hand, so every model keeps unknown keys
(``extra="allow"``) and only the fields the engine interprets are typed.

Models:
    ClassRule: Hit die and saving throws of a character class.
    SpellRule: A spell with an optional heal or damage effect.
    MonsterRule: Armour class, hit dice/points and attacks of a monster type.
    ItemRule: An item with an optional heal or armour-bonus effect.
    RuleTables: The four lookup tables loaded at process start.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from pydantic import ConfigDict, Field

from dnd_engine.models.base import WireModel


class RuleModel(WireModel):
    """Base for rule entries; unknown keys are preserved."""

    model_config = ConfigDict(extra="allow", frozen=True, validate_assignment=False)


# =============================================================================
# Classes
# =============================================================================


class ClassRule(RuleModel):
    """A character class.

    Attributes:
        hit_die: Sides of the die rolled for level-one hit points.
        saving_throws: Saving throw thresholds copied onto new characters.
    """

    hit_die: int | None = Field(default=None, ge=1)
    saving_throws: dict[str, int] | None = None


# =============================================================================
# Spells
# =============================================================================


class SpellEffect(RuleModel):
    """Dice notation for a healing or damaging spell."""

    heal: str | None = None
    damage: str | None = None


class SpellRule(RuleModel):
    """A castable spell."""

    name: str
    effect: SpellEffect | None = None


# =============================================================================
# Monsters
# =============================================================================


class MonsterAttackRule(RuleModel):
    """One attack of a monster, with its damage notation."""

    name: str = ""
    damage: str | None = None


class MonsterRule(RuleModel):
    """A monster type.

    Attributes:
        armor_class: Armour class of spawned instances.
        hit_dice: Hit dice, used for hit points when ``hit_points`` is absent.
        hit_points: Explicit hit points of spawned instances.
        attacks: Ordered attacks; the first one is used by monster AI.
    """

    armor_class: int | None = None
    hit_dice: int | None = None
    hit_points: int | None = None
    attacks: list[MonsterAttackRule] = Field(default_factory=list)


# =============================================================================
# Items
# =============================================================================


class ItemEffect(RuleModel):
    """What using an item does. Only ``heal`` and ``acBonus`` are applied."""

    heal: str | None = None
    ac_bonus: int | None = None


class ItemRule(RuleModel):
    """An item that can be given to and used by players."""

    name: str = ""
    effect: ItemEffect | None = None


# =============================================================================
# Tables
# =============================================================================


SpellBook = dict[str, dict[str, list[SpellRule]]]
"""Spells grouped by caster class, then by spell level."""


@dataclass(frozen=True)
class RuleTables:
    """The four read-only rule lookups.

    Attributes:
        classes: Class rules keyed by lower-case class name.
        spells: Spell rules keyed by caster class, then level.
        monsters: Monster rules keyed by monster type.
        items: Item rules keyed by item identifier.
    """

    classes: dict[str, ClassRule] = field(default_factory=dict)
    spells: SpellBook = field(default_factory=dict)
    monsters: dict[str, MonsterRule] = field(default_factory=dict)
    items: dict[str, ItemRule] = field(default_factory=dict)

    def iter_spells(self) -> Iterator[SpellRule]:
        """Yield every spell in definition order (class, then level)."""
        for levels in self.spells.values():
            for spells in levels.values():
                yield from spells


__all__ = [
    "ClassRule",
    "SpellEffect",
    "SpellRule",
    "MonsterAttackRule",
    "MonsterRule",
    "ItemEffect",
    "ItemRule",
    "SpellBook",
    "RuleTables",
]

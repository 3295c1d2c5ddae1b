"""Game rule constants shared by the resolution engine.

This module defines defaults applied when a character, monster or rule
entry does not supply its own value.
"""

from __future__ import annotations

# =============================================================================
# Dice
# =============================================================================

ATTACK_DIE = 20
"""Sides of the to-hit die for every attack and damaging spell."""

DEFAULT_DAMAGE_DIE = 6
"""Sides of the damage die for unarmed/player attacks."""

DEFAULT_MONSTER_DAMAGE = "1d6"
"""Damage notation used when a monster rule has no attacks."""

MAX_NOTATION_DICE = 1000
"""Largest dice count a ``NdS`` notation may roll, matching d20's roll limit."""

# =============================================================================
# Characters
# =============================================================================

DEFAULT_ARMOR_CLASS = 10
"""Armour class of a character or monster that does not define one."""

DEFAULT_ABILITY_SCORE = 10
"""Placeholder value for each of the six ability scores."""

PLACEHOLDER_SAVING_THROWS = {"deathRay": 12, "magic": 12, "paralysis": 12}
"""Saving throws assigned when the class rule has none."""

UNKNOWN_PLAYER_NAME = "Unknown"
"""Name given to a player created implicitly by character assignment."""

STATUS_UNCONSCIOUS = "unconscious"
"""Character status set when hit points drop to zero or below."""

# =============================================================================
# Monsters
# =============================================================================

HP_PER_HIT_DIE = 4
"""Hit points per hit die when a monster rule has no explicit hit points."""

DEFAULT_HIT_DICE = 1
"""Hit dice assumed when a monster rule has neither hitPoints nor hitDice."""

# =============================================================================
# Progression
# =============================================================================

XP_PER_LEVEL = 1000
"""Experience needed to advance is level x XP_PER_LEVEL."""

MIN_CHARACTER_LEVEL = 1
"""Starting level of every character."""


__all__ = [
    "ATTACK_DIE",
    "DEFAULT_DAMAGE_DIE",
    "DEFAULT_MONSTER_DAMAGE",
    "MAX_NOTATION_DICE",
    "DEFAULT_ARMOR_CLASS",
    "DEFAULT_ABILITY_SCORE",
    "PLACEHOLDER_SAVING_THROWS",
    "UNKNOWN_PLAYER_NAME",
    "STATUS_UNCONSCIOUS",
    "HP_PER_HIT_DIE",
    "DEFAULT_HIT_DICE",
    "XP_PER_LEVEL",
    "MIN_CHARACTER_LEVEL",
]

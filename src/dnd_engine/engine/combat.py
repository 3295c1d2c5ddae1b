"""Combat resolution.

Three opposed-roll attacks share one mechanic: draw a d20, hit if the roll
is at least the target's armour class, then subtract damage. Player
attacks deal a d6; monster attacks deal the damage notation of the
monster's first attack.

These functions mutate the registry's state and return a result; log
lines are written by the caller (see ``describe_*``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dnd_engine.core.constants import (
    ATTACK_DIE,
    DEFAULT_ARMOR_CLASS,
    DEFAULT_DAMAGE_DIE,
    DEFAULT_MONSTER_DAMAGE,
)
from dnd_engine.core.logging import get_logger
from dnd_engine.engine.dice import DiceRoller, parse_notation
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.models.game_state import Character, Player
from dnd_engine.models.rules import RuleTables


logger = get_logger(__name__)


# =============================================================================
# Results
# =============================================================================


@dataclass
class AttackResult:
    """Outcome of an attack against a player.

    Attributes:
        attacker: Attacker display name (player name or monster type).
        target: Target player name.
        roll: The d20 to-hit roll.
        hit: Whether the roll met the target's armour class.
        damage: Damage dealt; 0 on a miss.
        target_remaining_hp: Target hit points afterwards, None if the
            target has no character.
    """

    attacker: str
    target: str
    roll: int
    hit: bool
    damage: int
    target_remaining_hp: int | None

    def to_wire(self) -> dict[str, Any]:
        return {
            "attacker": self.attacker,
            "target": self.target,
            "roll": self.roll,
            "hit": self.hit,
            "damage": self.damage,
            "targetRemainingHp": self.target_remaining_hp,
        }


@dataclass
class MonsterAttackResult:
    """Outcome of a player attacking a monster.

    ``monster_remaining_hp`` may be negative; a monster at zero or below is
    already removed from its game when this result is returned.
    """

    attacker: str
    target: str
    roll: int
    hit: bool
    damage: int
    monster_remaining_hp: int
    monster_status: str

    def to_wire(self) -> dict[str, Any]:
        return {
            "attacker": self.attacker,
            "target": self.target,
            "roll": self.roll,
            "hit": self.hit,
            "damage": self.damage,
            "monsterRemainingHp": self.monster_remaining_hp,
            "monsterStatus": self.monster_status,
        }


# =============================================================================
# Helpers
# =============================================================================


def armor_class_of(player: Player) -> int:
    """Armour class of a player; 10 without a character."""
    if player.character is None:
        return DEFAULT_ARMOR_CLASS
    return player.character.ac


def damage_player(player: Player, amount: int) -> int:
    """Apply damage to a player, giving them a character if they lack one."""
    if player.character is None:
        player.character = Character(hp=0)
    return player.character.apply_damage(amount)


def monster_damage_notation(rules: RuleTables, monster_type: str) -> str:
    """Damage notation of a monster type's first attack, or ``1d6``."""
    rule = rules.monsters.get(monster_type)
    if rule is None or not rule.attacks or not rule.attacks[0].damage:
        return DEFAULT_MONSTER_DAMAGE
    return rule.attacks[0].damage


# =============================================================================
# Attacks
# =============================================================================


def attack(
    registry: GameRegistry,
    roller: DiceRoller,
    game_id: str,
    attacker_id: str,
    target_id: str,
) -> AttackResult:
    """Resolve a player attacking another player.

    Raises:
        NotFoundError: If the game, attacker or target does not exist.
    """
    attacker = registry.require_player(game_id, attacker_id)
    target = registry.require_player(game_id, target_id)

    roll = roller.roll_die(ATTACK_DIE)
    hit = roll >= armor_class_of(target)
    damage = 0
    if hit:
        damage = roller.roll_die(DEFAULT_DAMAGE_DIE)
        damage_player(target, damage)

    logger.info(
        "Player attack resolved",
        game_id=game_id,
        attacker_id=attacker_id,
        target_id=target_id,
        roll=roll,
        hit=hit,
        damage=damage,
    )
    return AttackResult(
        attacker=attacker.name,
        target=target.name,
        roll=roll,
        hit=hit,
        damage=damage,
        target_remaining_hp=target.character.hp if target.character else None,
    )


def attack_monster(
    registry: GameRegistry,
    roller: DiceRoller,
    game_id: str,
    attacker_id: str,
    instance_id: str,
) -> MonsterAttackResult:
    """Resolve a player attacking a monster instance.

    A monster reduced to zero or fewer hit points is marked dead and
    removed from the game.

    Raises:
        NotFoundError: If the game, attacker or monster does not exist.
    """
    attacker = registry.require_player(game_id, attacker_id)
    monster = registry.require_monster(game_id, instance_id)

    roll = roller.roll_die(ATTACK_DIE)
    hit = roll >= monster.ac
    damage = 0
    if hit:
        damage = roller.roll_die(DEFAULT_DAMAGE_DIE)
        monster.apply_damage(damage)
        if monster.is_dead:
            registry.remove_monster(game_id, instance_id)

    logger.info(
        "Monster attacked",
        game_id=game_id,
        attacker_id=attacker_id,
        instance_id=instance_id,
        roll=roll,
        hit=hit,
        damage=damage,
        status=monster.status,
    )
    return MonsterAttackResult(
        attacker=attacker.name,
        target=monster.type,
        roll=roll,
        hit=hit,
        damage=damage,
        monster_remaining_hp=monster.hp,
        monster_status=monster.status,
    )


def monster_attack(
    registry: GameRegistry,
    rules: RuleTables,
    roller: DiceRoller,
    game_id: str,
    instance_id: str,
    target_id: str,
) -> AttackResult:
    """Resolve a monster attacking a player.

    Damage uses the monster's first attack notation; notation that does
    not parse falls back to a single d6.

    Raises:
        NotFoundError: If the game, monster or target does not exist.
    """
    monster = registry.require_monster(game_id, instance_id)
    target = registry.require_player(game_id, target_id)

    roll = roller.roll_die(ATTACK_DIE)
    hit = roll >= armor_class_of(target)
    damage = 0
    if hit:
        notation = monster_damage_notation(rules, monster.type)
        if parse_notation(notation) is None:
            damage = roller.roll_die(DEFAULT_DAMAGE_DIE)
        else:
            damage = roller.roll_notation(notation)
        damage_player(target, damage)

    logger.info(
        "Monster attack resolved",
        game_id=game_id,
        instance_id=instance_id,
        target_id=target_id,
        roll=roll,
        hit=hit,
        damage=damage,
    )
    return AttackResult(
        attacker=monster.type,
        target=target.name,
        roll=roll,
        hit=hit,
        damage=damage,
        target_remaining_hp=target.character.hp if target.character else None,
    )


# =============================================================================
# Log lines
# =============================================================================


def describe_attack(result: AttackResult) -> str:
    """Log line for a player attacking a player."""
    if result.hit:
        return (
            f"{result.attacker} hit {result.target} for {result.damage} damage "
            f"(roll {result.roll})."
        )
    return f"{result.attacker} missed {result.target} (roll {result.roll})."


def describe_monster_attack(result: MonsterAttackResult) -> str:
    """Log line for a player attacking a monster."""
    if result.hit:
        return (
            f"{result.attacker} hit the {result.target} for {result.damage} damage "
            f"(roll {result.roll})."
        )
    return f"{result.attacker} missed the {result.target} (roll {result.roll})."


def describe_monster_strike(result: AttackResult) -> str:
    """Log line for a monster attacking a player."""
    if result.hit:
        return (
            f"The {result.attacker} hits {result.target} for {result.damage} damage "
            f"(roll {result.roll})."
        )
    return f"The {result.attacker} misses {result.target} (roll {result.roll})."


__all__ = [
    "AttackResult",
    "MonsterAttackResult",
    "armor_class_of",
    "damage_player",
    "monster_damage_notation",
    "attack",
    "attack_monster",
    "monster_attack",
    "describe_attack",
    "describe_monster_attack",
    "describe_monster_strike",
]

"""Spell casting.

Spells are looked up by name across every caster class and level. A spell
either heals a player, damages a player or monster after a to-hit roll,
or does nothing. Every cast appends exactly one line to the game log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from dnd_engine.core.constants import ATTACK_DIE
from dnd_engine.core.exceptions import InvalidGameStateError, NotFoundError
from dnd_engine.core.logging import get_logger
from dnd_engine.engine.combat import armor_class_of, damage_player
from dnd_engine.engine.dice import DiceRoller
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.models.game_state import Character, MonsterInstance, Player
from dnd_engine.models.rules import RuleTables, SpellRule


logger = get_logger(__name__)

TargetType = Literal["player", "monster"]


@dataclass
class SpellOutcome:
    """The log line written for a cast and its structured result."""

    message: str
    result: dict[str, Any] = field(default_factory=dict)


def find_spell(rules: RuleTables, name: str) -> SpellRule | None:
    """Find a spell by name, ignoring case.

    Spells are enumerated by caster class, then level, in the order they
    are defined; when two spells share a name the first one wins.
    """
    wanted = name.lower()
    for spell in rules.iter_spells():
        if spell.name.lower() == wanted:
            return spell
    return None


def _resolve_target(
    registry: GameRegistry,
    game_id: str,
    target_type: str,
    target_id: str,
) -> Player | MonsterInstance:
    game = registry.require_game(game_id)
    target: Player | MonsterInstance | None = None
    if target_type == "player":
        target = game.players.get(target_id)
    elif target_type == "monster":
        target = game.monsters.get(target_id)
    if target is None:
        raise NotFoundError(
            "Target not found",
            resource=target_type or "target",
            identifier=target_id,
        )
    return target


def cast_spell(
    registry: GameRegistry,
    rules: RuleTables,
    roller: DiceRoller,
    game_id: str,
    caster_id: str,
    spell_name: str,
    target_type: str,
    target_id: str,
) -> SpellOutcome:
    """Cast a spell on a player or monster.

    Args:
        registry: Game registry.
        rules: Rule tables holding the spell book.
        roller: Dice roller.
        game_id: Game identifier.
        caster_id: Casting player.
        spell_name: Spell name, matched case-insensitively.
        target_type: "player" or "monster".
        target_id: Player id or monster instance id.

    Returns:
        The logged message and a result dict.

    Raises:
        NotFoundError: Unknown spell, game, caster or target.
        InvalidGameStateError: A healing spell aimed at a monster.
    """
    spell = find_spell(rules, spell_name)
    if spell is None:
        raise NotFoundError(f"Unknown spell: {spell_name}", resource="spell", identifier=spell_name)
    caster = registry.require_player(game_id, caster_id)
    target = _resolve_target(registry, game_id, target_type, target_id)

    effect = spell.effect
    if effect is not None and effect.heal:
        if not isinstance(target, Player):
            raise InvalidGameStateError(
                "Healing spells can only target players",
                current_state=target_type,
                expected_states=["player"],
            )
        amount = roller.roll_notation(effect.heal)
        if target.character is None:
            target.character = Character(hp=0)
        target.character.apply_healing(amount)
        outcome = SpellOutcome(
            message=f"{caster.name} casts {spell.name} on {target.name}, healing {amount} HP.",
            result={"caster": caster.name, "target": target.name, "heal": amount},
        )
    elif effect is not None and effect.damage:
        outcome = _cast_damage(registry, roller, game_id, caster, spell, target, effect.damage)
    else:
        outcome = SpellOutcome(
            message=f"{caster.name} casts {spell.name}, but nothing happens.",
            result={"caster": caster.name, "spell": spell.name},
        )

    registry.append_log(game_id, outcome.message)
    logger.info(
        "Spell cast",
        game_id=game_id,
        caster_id=caster_id,
        spell=spell.name,
        target_type=target_type,
        target_id=target_id,
    )
    return outcome


def _cast_damage(
    registry: GameRegistry,
    roller: DiceRoller,
    game_id: str,
    caster: Player,
    spell: SpellRule,
    target: Player | MonsterInstance,
    notation: str,
) -> SpellOutcome:
    if isinstance(target, Player):
        target_ac = armor_class_of(target)
        target_name = target.name
    else:
        target_ac = target.ac
        target_name = target.type

    roll = roller.roll_die(ATTACK_DIE)
    hit = roll >= target_ac
    damage = 0
    if hit:
        damage = roller.roll_notation(notation)
        if isinstance(target, Player):
            damage_player(target, damage)
        else:
            target.apply_damage(damage)
            if target.is_dead:
                registry.remove_monster(game_id, target.instance_id)

    if hit:
        message = f"{caster.name} casts {spell.name} and hits {target_name} for {damage} damage."
    else:
        message = f"{caster.name} casts {spell.name} but misses {target_name}."
    return SpellOutcome(
        message=message,
        result={
            "caster": caster.name,
            "target": target_name,
            "roll": roll,
            "hit": hit,
            "damage": damage,
        },
    )


__all__ = ["TargetType", "SpellOutcome", "find_spell", "cast_spell"]

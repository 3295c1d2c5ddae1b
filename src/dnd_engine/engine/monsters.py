"""Monster lifecycle: spawning validated against the monster rules."""

from __future__ import annotations

from dnd_engine.core.exceptions import NotFoundError
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.models.game_state import MonsterInstance
from dnd_engine.models.rules import RuleTables


def spawn_monster(
    registry: GameRegistry,
    rules: RuleTables,
    game_id: str,
    monster_type: str,
) -> MonsterInstance:
    """Spawn a monster of a known type and announce it in the log.

    Raises:
        NotFoundError: If the monster type has no rule.
    """
    rule = rules.monsters.get(monster_type)
    if rule is None:
        raise NotFoundError(
            f"Unknown monster type: {monster_type}",
            resource="monster_type",
            identifier=monster_type,
        )
    monster = registry.spawn_monster(game_id, monster_type, rule)
    registry.append_log(game_id, f"A {monster_type} appears!")
    return monster


__all__ = ["spawn_monster"]

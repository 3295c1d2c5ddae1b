"""Experience rewards."""

from __future__ import annotations

from dnd_engine.core.logging import get_logger
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.models.game_state import Player


logger = get_logger(__name__)


def add_experience(registry: GameRegistry, game_id: str, player_id: str, xp: int) -> Player:
    """Award experience to a player and log the gain.

    Level-ups are applied and logged by the registry before the gain line,
    so a large reward reads "reached level N!" then "gained X XP.".

    Raises:
        NotFoundError: If the player or their character does not exist.
        ValidationError: If ``xp`` is negative.
    """
    player = registry.add_experience(game_id, player_id, xp)
    registry.append_log(game_id, f"{player.name} gained {xp} XP.")
    logger.info(
        "Experience awarded",
        game_id=game_id,
        player_id=player_id,
        xp=xp,
        level=player.character.level if player.character is not None else None,
    )
    return player


__all__ = ["add_experience"]

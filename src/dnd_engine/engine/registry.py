"""In-memory registry of live games.

The GameRegistry is the only mutable shared resource of the server. It is
constructed once at process start and passed explicitly to every engine
operation; games are independent and no operation reads another game's
state.

All mutations happen synchronously inside a single event-loop step, so
no locking is needed: an action is applied to completion before the next
one (player-initiated or monster AI) starts.
"""

from __future__ import annotations

import copy
import time
from collections.abc import Iterator, Mapping
from typing import Any
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from dnd_engine.core.constants import (
    DEFAULT_ARMOR_CLASS,
    DEFAULT_HIT_DICE,
    HP_PER_HIT_DIE,
    UNKNOWN_PLAYER_NAME,
    XP_PER_LEVEL,
)
from dnd_engine.core.exceptions import NotFoundError, ValidationError
from dnd_engine.core.logging import get_logger
from dnd_engine.models.game_state import Character, Game, MonsterInstance, Player
from dnd_engine.models.rules import MonsterRule


logger = get_logger(__name__)


def new_instance_id() -> str:
    """Generate a process-unique monster instance id.

    Combines a nanosecond timestamp with a random UUID so that two spawns
    in the same tick cannot collide.
    """
    return f"m_{time.time_ns()}_{uuid4().hex}"


def _wire_keys(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Rename snake_case Character field names to their wire aliases.

    Keys that are not Character fields (client extras) pass through.
    """
    renamed: dict[str, Any] = {}
    for key, value in fields.items():
        info = Character.model_fields.get(key)
        renamed[info.alias or key if info is not None else key] = value
    return renamed


class GameRegistry:
    """Owner of every Game, Player, Character and MonsterInstance.

    Lookups that return ``None`` (``get_game``, ``get_player``,
    ``get_monster``, ``export_character``) are existence checks; every
    other operation raises NotFoundError for an unknown player.

    Example:
        >>> registry = GameRegistry()
        >>> registry.add_player("g1", "p1", "Rowan").name
        'Rowan'
        >>> registry.add_player("g1", "p1", "Someone else").name
        'Rowan'
    """

    def __init__(self) -> None:
        self._games: dict[str, Game] = {}

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._games

    def __len__(self) -> int:
        return len(self._games)

    def __iter__(self) -> Iterator[Game]:
        return iter(list(self._games.values()))

    # =========================================================================
    # Games
    # =========================================================================

    def create_or_get_game(self, game_id: str) -> Game:
        """Return the game with this id, creating it on first reference."""
        game = self._games.get(game_id)
        if game is None:
            game = Game(id=game_id)
            self._games[game_id] = game
            logger.info("Game created", game_id=game_id)
        return game

    def get_game(self, game_id: str) -> Game | None:
        """Return the game with this id, or None. Never creates."""
        return self._games.get(game_id)

    def require_game(self, game_id: str) -> Game:
        """Return the game with this id.

        Raises:
            NotFoundError: If the game does not exist.
        """
        game = self._games.get(game_id)
        if game is None:
            raise NotFoundError(
                f"Game {game_id} does not exist",
                resource="game",
                identifier=game_id,
            )
        return game

    def append_log(self, game_id: str, message: str) -> None:
        """Append a line to the game log."""
        self.create_or_get_game(game_id).log.append(message)
        logger.debug("Log appended", game_id=game_id, entry=message)

    # =========================================================================
    # Players
    # =========================================================================

    def add_player(self, game_id: str, player_id: str, name: str) -> Player:
        """Add a player; an existing player keeps its original name."""
        game = self.create_or_get_game(game_id)
        player = game.players.get(player_id)
        if player is None:
            player = Player(id=player_id, name=name)
            game.players[player_id] = player
            logger.info("Player added", game_id=game_id, player_id=player_id)
        return player

    def get_player(self, game_id: str, player_id: str) -> Player | None:
        """Return a player, or None if the game or player is unknown."""
        game = self._games.get(game_id)
        if game is None:
            return None
        return game.players.get(player_id)

    def require_player(self, game_id: str, player_id: str) -> Player:
        """Return a player.

        Raises:
            NotFoundError: If the game or player does not exist.
        """
        game = self.require_game(game_id)
        player = game.players.get(player_id)
        if player is None:
            raise NotFoundError(
                f"Player {player_id} is not in game {game_id}",
                resource="player",
                identifier=player_id,
            )
        return player

    def set_character(
        self,
        game_id: str,
        player_id: str,
        fields: Mapping[str, Any],
    ) -> Player:
        """Merge fields onto a player's character.

        The merge is shallow: keys present in ``fields`` replace existing
        values, all other existing fields are kept. A player that has not
        joined is created with the name "Unknown".

        Args:
            game_id: Game identifier.
            player_id: Player identifier.
            fields: Character fields, camelCase or snake_case.

        Returns:
            The updated player.

        Raises:
            ValidationError: If the merged character is not valid.
        """
        game = self.create_or_get_game(game_id)
        player = game.players.get(player_id)
        if player is None:
            player = Player(id=player_id, name=UNKNOWN_PLAYER_NAME)
            game.players[player_id] = player

        merged: dict[str, Any] = (
            player.character.model_dump(by_alias=True) if player.character else {}
        )
        merged.update(_wire_keys(fields))
        try:
            player.character = Character.model_validate(merged)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid character data: {exc.errors()[0]['msg']}",
                field_name=".".join(str(part) for part in exc.errors()[0]["loc"]),
            ) from exc
        return player

    def add_experience(self, game_id: str, player_id: str, xp: int) -> Player:
        """Add experience and level up as many times as it allows.

        While experience is at least ``level * 1000`` the threshold is
        consumed and the level increases by one; each level-up is logged.

        Raises:
            NotFoundError: If the player or their character does not exist.
            ValidationError: If ``xp`` is negative.
        """
        if xp < 0:
            raise ValidationError("Experience cannot be negative", field_name="xp", invalid_value=xp)
        player = self.require_player(game_id, player_id)
        character = player.character
        if character is None:
            raise NotFoundError(
                f"Player {player_id} has no character",
                resource="character",
                identifier=player_id,
            )

        character.experience += xp
        while character.experience >= character.level * XP_PER_LEVEL:
            character.experience -= character.level * XP_PER_LEVEL
            character.level += 1
            self.append_log(game_id, f"{player.name} has reached level {character.level}!")
            logger.info(
                "Level up",
                game_id=game_id,
                player_id=player_id,
                level=character.level,
            )
        return player

    def add_item_to_player(self, game_id: str, player_id: str, item_id: str) -> Player:
        """Append an item to a player's inventory, creating a character if needed."""
        player = self.require_player(game_id, player_id)
        if player.character is None:
            player.character = Character()
        player.character.inventory.append(item_id)
        return player

    def remove_item_from_player(self, game_id: str, player_id: str, item_id: str) -> str | None:
        """Remove the first occurrence of an item from a player's inventory.

        Returns:
            The removed item id, or None if it was not in the inventory.
        """
        player = self.get_player(game_id, player_id)
        if player is None or player.character is None:
            return None
        inventory = player.character.inventory
        if item_id not in inventory:
            return None
        inventory.remove(item_id)
        return item_id

    def export_character(self, game_id: str, player_id: str) -> dict[str, Any] | None:
        """Return a detached deep copy of a player's character, or None."""
        player = self.get_player(game_id, player_id)
        if player is None or player.character is None:
            return None
        return copy.deepcopy(player.character.to_wire())

    # =========================================================================
    # Monsters
    # =========================================================================

    def spawn_monster(self, game_id: str, monster_type: str, rule: MonsterRule) -> MonsterInstance:
        """Create a monster instance from its rule and add it to the game.

        Hit points come from the rule's ``hitPoints``, falling back to
        ``hitDice * 4``.
        """
        game = self.create_or_get_game(game_id)
        hit_points = rule.hit_points or (rule.hit_dice or DEFAULT_HIT_DICE) * HP_PER_HIT_DIE
        monster = MonsterInstance(
            instance_id=new_instance_id(),
            type=monster_type,
            hp=hit_points,
            ac=rule.armor_class or DEFAULT_ARMOR_CLASS,
        )
        game.monsters[monster.instance_id] = monster
        logger.info(
            "Monster spawned",
            game_id=game_id,
            monster_type=monster_type,
            instance_id=monster.instance_id,
            hp=monster.hp,
        )
        return monster

    def get_monster(self, game_id: str, instance_id: str) -> MonsterInstance | None:
        """Return a monster instance, or None if absent."""
        game = self._games.get(game_id)
        if game is None:
            return None
        return game.monsters.get(instance_id)

    def require_monster(self, game_id: str, instance_id: str) -> MonsterInstance:
        """Return a monster instance.

        Raises:
            NotFoundError: If the game or monster does not exist.
        """
        monster = self.require_game(game_id).monsters.get(instance_id)
        if monster is None:
            raise NotFoundError(
                f"Monster {instance_id} not found in game {game_id}",
                resource="monster",
                identifier=instance_id,
            )
        return monster

    def remove_monster(self, game_id: str, instance_id: str) -> None:
        """Drop a monster instance from its game."""
        game = self._games.get(game_id)
        if game is not None and game.monsters.pop(instance_id, None) is not None:
            logger.info("Monster removed", game_id=game_id, instance_id=instance_id)


__all__ = ["GameRegistry", "new_instance_id"]

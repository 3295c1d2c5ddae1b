"""Giving and using items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dnd_engine.core.exceptions import NotFoundError
from dnd_engine.core.logging import get_logger
from dnd_engine.engine.dice import DiceRoller
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.models.game_state import Player
from dnd_engine.models.rules import ItemRule, RuleTables


logger = get_logger(__name__)


@dataclass
class ItemUseResult:
    """What happened when a player used an item."""

    player_id: str
    item_id: str
    message: str

    def to_wire(self) -> dict[str, Any]:
        return {"playerId": self.player_id, "itemId": self.item_id, "message": self.message}


def require_item(rules: RuleTables, item_id: str) -> ItemRule:
    """Look up an item rule.

    Raises:
        NotFoundError: If the item is not in the rule table.
    """
    item = rules.items.get(item_id)
    if item is None:
        raise NotFoundError(f"Unknown item: {item_id}", resource="item", identifier=item_id)
    return item


def give_item(
    registry: GameRegistry,
    rules: RuleTables,
    game_id: str,
    player_id: str,
    item_id: str,
) -> Player:
    """Add an item to a player's inventory and log it.

    Raises:
        NotFoundError: If the item or player is unknown.
    """
    item = require_item(rules, item_id)
    player = registry.add_item_to_player(game_id, player_id, item_id)
    registry.append_log(game_id, f"{player.name} obtained {item.name or item_id}.")
    logger.info("Item given", game_id=game_id, player_id=player_id, item_id=item_id)
    return player


def use_item(
    registry: GameRegistry,
    rules: RuleTables,
    roller: DiceRoller,
    game_id: str,
    player_id: str,
    item_id: str,
) -> ItemUseResult:
    """Consume one copy of an item from a player's inventory.

    Healing items add their dice roll to hit points and armour items add
    their bonus to armour class; neither is capped. An item with no
    recognised effect is still consumed.

    Raises:
        NotFoundError: If the item is unknown, the player is unknown, or
            the item is not in the player's inventory.
    """
    item = require_item(rules, item_id)
    player = registry.require_player(game_id, player_id)
    character = player.character
    if character is None or item_id not in character.inventory:
        raise NotFoundError(
            "Item not in inventory",
            resource="inventory_item",
            identifier=item_id,
        )
    registry.remove_item_from_player(game_id, player_id, item_id)

    name = item.name or item_id
    effect = item.effect
    if effect is not None and effect.heal:
        healed = roller.roll_notation(effect.heal)
        character.apply_healing(healed)
        message = f"{player.name} drinks a {name} and heals {healed} HP."
    elif effect is not None and effect.ac_bonus:
        character.ac += effect.ac_bonus
        message = f"{player.name} equips a {name} and gains +{effect.ac_bonus} armour class."
    else:
        message = f"{player.name} uses {name}, but nothing happens."

    registry.append_log(game_id, message)
    logger.info("Item used", game_id=game_id, player_id=player_id, item_id=item_id)
    return ItemUseResult(player_id=player_id, item_id=item_id, message=message)


__all__ = ["ItemUseResult", "require_item", "give_item", "use_item"]

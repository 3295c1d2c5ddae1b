"""Game engine facade.

GameEngine wires the registry, rule tables, content libraries and dice
roller together and exposes one method per operation the session gateway
needs. Every method either completes its mutation or raises a
DndEngineError before touching state.

Example:
    >>> engine = GameEngine(content=ContentLibrary.from_settings(settings.content))
    >>> engine.join("g1", "p1", "Rowan")
    >>> engine.create_character("g1", "p1", {"name": "Rowan", "class": "Fighter"})
    >>> engine.get_game_state("g1")["players"][0]["character"]["hp"]
    7
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dnd_engine.content import ContentLibrary
from dnd_engine.core.constants import (
    DEFAULT_ABILITY_SCORE,
    DEFAULT_ARMOR_CLASS,
    PLACEHOLDER_SAVING_THROWS,
)
from dnd_engine.core.exceptions import NotFoundError
from dnd_engine.core.logging import get_logger
from dnd_engine.engine import combat, dialogue, items, monsters, progression, spells
from dnd_engine.engine.actions import ActionOutcome, handle_action
from dnd_engine.engine.dice import DiceRoller
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.models.game_state import MonsterInstance, Player
from dnd_engine.models.rules import RuleTables


logger = get_logger(__name__)

_ABILITY_KEYS = ("str", "dex", "con", "int", "wis", "cha")


class GameEngine:
    """Entry point for every game operation.

    Attributes:
        registry: Live game state.
        content: Rules, campaigns, dialogues and maps.
        roller: Dice roller shared by all resolutions.
    """

    def __init__(
        self,
        registry: GameRegistry | None = None,
        content: ContentLibrary | None = None,
        roller: DiceRoller | None = None,
    ) -> None:
        self.registry = registry or GameRegistry()
        self.content = content or ContentLibrary()
        self.roller = roller or DiceRoller()

    @property
    def rules(self) -> RuleTables:
        return self.content.rules

    # =========================================================================
    # Sessions
    # =========================================================================

    def join(self, game_id: str, player_id: str, player_name: str) -> Player:
        """Add a player to a game, creating the game if needed."""
        player = self.registry.add_player(game_id, player_id, player_name)
        self.registry.append_log(game_id, f"{player_name} joined the game.")
        return player

    def select_campaign(self, game_id: str, campaign_id: str) -> dict[str, str]:
        """Attach a campaign to a game.

        Returns:
            The campaign summary ``{id, name, description}``.

        Raises:
            NotFoundError: If the campaign does not exist.
        """
        campaign = self.content.campaigns.get_campaign(campaign_id)
        if campaign is None:
            raise NotFoundError(
                f"Campaign {campaign_id} does not exist",
                resource="campaign",
                identifier=campaign_id,
            )
        game = self.registry.create_or_get_game(game_id)
        game.campaign = campaign
        self.registry.append_log(game_id, f"Campaign '{campaign.name}' selected.")
        logger.info("Campaign selected", game_id=game_id, campaign_id=campaign_id)
        return campaign.summary()

    def create_character(self, game_id: str, player_id: str, fields: Mapping[str, Any]) -> Player:
        """Create or update a player's character from client fields.

        Hit points are rolled from the class's hit die when the class is
        known; armour class, ability scores and saving throws get
        defaults when not supplied. Class saving throws always win over
        client-supplied ones.

        Raises:
            ValidationError: If the resulting character is invalid.
        """
        character = dict(fields)
        class_key = str(character.get("class") or "").lower()
        rule = self.rules.classes.get(class_key)
        if rule is not None and rule.hit_die:
            character["hp"] = self.roller.roll_die(rule.hit_die)
        if not character.get("ac"):
            character["ac"] = DEFAULT_ARMOR_CLASS
        if not character.get("abilityScores"):
            character["abilityScores"] = {key: DEFAULT_ABILITY_SCORE for key in _ABILITY_KEYS}
        if rule is not None and rule.saving_throws:
            character["savingThrows"] = dict(rule.saving_throws)
        elif not character.get("savingThrows"):
            character["savingThrows"] = dict(PLACEHOLDER_SAVING_THROWS)

        player = self.registry.set_character(game_id, player_id, character)
        race = character.get("race") or "unknown race"
        character_class = character.get("class") or "unknown class"
        self.registry.append_log(
            game_id,
            f"{player.name} created a character: {character.get('name', '')} "
            f"({race} {character_class}) with {character.get('hp') or '?'} HP.",
        )
        logger.info(
            "Character created",
            game_id=game_id,
            player_id=player_id,
            character_class=class_key or None,
        )
        return player

    # =========================================================================
    # Actions
    # =========================================================================

    def dispatch_action(self, game_id: str, player_id: str, payload: dict[str, Any]) -> ActionOutcome:
        """Resolve a generic player action (roll, attack, castSpell, other)."""
        return handle_action(self.registry, self.rules, self.roller, game_id, player_id, payload)

    def attack(self, game_id: str, attacker_id: str, target_id: str) -> combat.AttackResult:
        """Player attacks player; the outcome is logged."""
        result = combat.attack(self.registry, self.roller, game_id, attacker_id, target_id)
        self.registry.append_log(game_id, combat.describe_attack(result))
        return result

    def attack_monster(self, game_id: str, attacker_id: str, instance_id: str) -> combat.MonsterAttackResult:
        """Player attacks monster; the outcome is logged."""
        result = combat.attack_monster(self.registry, self.roller, game_id, attacker_id, instance_id)
        self.registry.append_log(game_id, combat.describe_monster_attack(result))
        return result

    def monster_attack(self, game_id: str, instance_id: str, target_id: str) -> combat.AttackResult:
        """Monster attacks player; the outcome is logged."""
        result = combat.monster_attack(
            self.registry, self.rules, self.roller, game_id, instance_id, target_id
        )
        self.registry.append_log(game_id, combat.describe_monster_strike(result))
        return result

    def cast_spell(
        self,
        game_id: str,
        caster_id: str,
        spell_name: str,
        target_type: str,
        target_id: str,
    ) -> spells.SpellOutcome:
        return spells.cast_spell(
            self.registry,
            self.rules,
            self.roller,
            game_id,
            caster_id,
            spell_name,
            target_type,
            target_id,
        )

    # =========================================================================
    # Monsters, items, experience
    # =========================================================================

    def spawn_monster(self, game_id: str, monster_type: str) -> MonsterInstance:
        return monsters.spawn_monster(self.registry, self.rules, game_id, monster_type)

    def give_item(self, game_id: str, player_id: str, item_id: str) -> Player:
        return items.give_item(self.registry, self.rules, game_id, player_id, item_id)

    def use_item(self, game_id: str, player_id: str, item_id: str) -> items.ItemUseResult:
        return items.use_item(self.registry, self.rules, self.roller, game_id, player_id, item_id)

    def add_experience(self, game_id: str, player_id: str, xp: int) -> Player:
        return progression.add_experience(self.registry, game_id, player_id, xp)

    # =========================================================================
    # Dialogue
    # =========================================================================

    def start_dialogue(self, dialogue_id: str, conversation_id: str) -> dialogue.DialogueNode:
        return dialogue.start_dialogue(self.content.dialogues, dialogue_id, conversation_id)

    def choose_dialogue_option(
        self,
        game_id: str,
        player_id: str,
        dialogue_id: str,
        conversation_id: str,
        node_id: str,
        option_index: int,
    ) -> dialogue.DialogueNode | dialogue.DialogueEnd:
        return dialogue.choose_dialogue_option(
            self.registry,
            self.content.dialogues,
            game_id,
            player_id,
            dialogue_id,
            conversation_id,
            node_id,
            option_index,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def export_character(self, game_id: str, player_id: str) -> dict[str, Any] | None:
        """Detached copy of a player's character, or None."""
        return self.registry.export_character(game_id, player_id)

    def get_game_state(self, game_id: str) -> dict[str, Any] | None:
        """JSON snapshot of a game, or None for an unknown game."""
        game = self.registry.get_game(game_id)
        if game is None:
            return None
        return game.snapshot()

    def eligible_targets(self, game_id: str) -> list[Player]:
        """Players a monster may attack: those with a conscious character."""
        game = self.registry.get_game(game_id)
        if game is None:
            return []
        return [
            player
            for player in game.players.values()
            if player.character is not None and player.character.is_conscious
        ]


__all__ = ["GameEngine"]

"""Pydantic V2 schemas for game state, rule tables and content.

Modules:
    game_state: Game, Player, Character, MonsterInstance.
    rules: Class, spell, monster and item rules.
    dialogue: Dialogue files, conversations, nodes and options.
    campaign: Campaign documents.
"""

from __future__ import annotations

from dnd_engine.models.base import WireModel
from dnd_engine.models.campaign import Campaign
from dnd_engine.models.dialogue import (
    Conversation,
    DialogueFile,
    DialogueNodeDef,
    DialogueOption,
    Reward,
)
from dnd_engine.models.game_state import (
    AbilityScores,
    Character,
    Game,
    MonsterInstance,
    Player,
)
from dnd_engine.models.rules import (
    ClassRule,
    ItemEffect,
    ItemRule,
    MonsterAttackRule,
    MonsterRule,
    RuleTables,
    SpellEffect,
    SpellRule,
)


__all__ = [
    "WireModel",
    # Game state
    "AbilityScores",
    "Character",
    "Player",
    "MonsterInstance",
    "Game",
    # Campaign
    "Campaign",
    # Rules
    "ClassRule",
    "SpellEffect",
    "SpellRule",
    "MonsterAttackRule",
    "MonsterRule",
    "ItemEffect",
    "ItemRule",
    "RuleTables",
    # Dialogue
    "Reward",
    "DialogueOption",
    "DialogueNodeDef",
    "Conversation",
    "DialogueFile",
]

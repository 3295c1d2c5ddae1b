"""Game engine: registry, dice, and rule resolution.

Exports:
    GameEngine: Facade used by the session gateway.
    GameRegistry: In-memory store of live games.
    DiceRoller: Dice rolling with notation support.
    parse_action / handle_action: Generic player action dispatch.
"""

from __future__ import annotations

from dnd_engine.engine.actions import ActionOutcome, handle_action, parse_action
from dnd_engine.engine.controller import GameEngine
from dnd_engine.engine.dialogue import DialogueEnd, DialogueNode
from dnd_engine.engine.dice import DiceRoller, parse_notation
from dnd_engine.engine.registry import GameRegistry


__all__ = [
    "GameEngine",
    "GameRegistry",
    "DiceRoller",
    "parse_notation",
    "ActionOutcome",
    "parse_action",
    "handle_action",
    "DialogueNode",
    "DialogueEnd",
]

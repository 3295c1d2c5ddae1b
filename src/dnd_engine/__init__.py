"""
dnd-engine - Multiplayer Tabletop RPG Game Server
=================================================

An in-memory game engine for a tabletop role-playing game: game and
player registry, dice, combat, spells, items, experience and dialogue
resolution, served to clients over REST and WebSocket.

Example:
    >>> from dnd_engine import GameEngine
    >>> engine = GameEngine()
    >>> engine.join("g1", "p1", "Rowan").name
    'Rowan'
"""

from __future__ import annotations

from dnd_engine.core.exceptions import DndEngineError, InvalidGameStateError, NotFoundError
from dnd_engine.engine.controller import GameEngine
from dnd_engine.engine.registry import GameRegistry


__version__ = "0.1.0"

__all__ = [
    "__version__",
    "GameEngine",
    "GameRegistry",
    "DndEngineError",
    "NotFoundError",
    "InvalidGameStateError",
]

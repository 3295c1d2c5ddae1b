"""Incoming WebSocket message schemas.

Clients send ``{"event": <name>, ...fields}`` with camelCase fields. The
acting player is always the connection itself, never a field.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from dnd_engine.models.base import WireModel


class GameMessage(WireModel):
    game_id: str = Field(min_length=1)


class JoinGameMessage(GameMessage):
    player_name: str = Field(min_length=1)


class ActionMessage(GameMessage):
    action: dict[str, Any] = Field(default_factory=dict)


class SelectCampaignMessage(GameMessage):
    campaign_id: str


class SpawnMonsterMessage(GameMessage):
    monster_type: str


class GiveItemMessage(GameMessage):
    target_player_id: str
    item_id: str


class UseItemMessage(GameMessage):
    item_id: str


class StartDialogueMessage(GameMessage):
    dialogue_id: str
    conversation_id: str


class ChooseDialogueOptionMessage(GameMessage):
    dialogue_id: str
    conversation_id: str
    node_id: str
    option_index: int


class ExportCharacterMessage(GameMessage):
    pass


class CreateCharacterMessage(GameMessage):
    character: dict[str, Any] = Field(default_factory=dict)


__all__ = [
    "GameMessage",
    "JoinGameMessage",
    "ActionMessage",
    "SelectCampaignMessage",
    "SpawnMonsterMessage",
    "GiveItemMessage",
    "UseItemMessage",
    "StartDialogueMessage",
    "ChooseDialogueOptionMessage",
    "ExportCharacterMessage",
    "CreateCharacterMessage",
]

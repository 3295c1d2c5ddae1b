"""WebSocket session gateway.

One connection is one player; its id is generated on connect and sent to
the client in a ``connected`` event. Each incoming message names an
event handled below. Results meant for the acting player go only to
that socket; state changes are broadcast as ``gameState`` to the game
room. Any engine error is reported privately and the connection stays
open.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from dnd_engine.core.config import Settings
from dnd_engine.core.exceptions import DndEngineError
from dnd_engine.core.logging import bind_context, clear_context, get_logger
from dnd_engine.engine.controller import GameEngine
from dnd_engine.engine.dialogue import DialogueEnd
from dnd_engine.server.hub import ConnectionHub
from dnd_engine.server.messages import (
    ActionMessage,
    ChooseDialogueOptionMessage,
    CreateCharacterMessage,
    ExportCharacterMessage,
    GiveItemMessage,
    JoinGameMessage,
    SelectCampaignMessage,
    SpawnMonsterMessage,
    StartDialogueMessage,
    UseItemMessage,
)
from dnd_engine.server.scheduler import MonsterAIScheduler


logger = get_logger(__name__)

router = APIRouter()


@dataclass
class Session:
    """A connected player and the shared services it talks to."""

    websocket: WebSocket
    player_id: str
    engine: GameEngine
    hub: ConnectionHub
    scheduler: MonsterAIScheduler
    settings: Settings

    async def reply(self, event: str, data: Any = None) -> None:
        await self.hub.send(self.websocket, event, data)

    async def broadcast_state(self, game_id: str) -> None:
        await self.hub.broadcast(game_id, "gameState", self.engine.get_game_state(game_id))


Handler = Callable[[Session, Any], Awaitable[None]]


# =============================================================================
# Event handlers
# =============================================================================


async def on_join_game(session: Session, message: JoinGameMessage) -> None:
    session.engine.join(message.game_id, session.player_id, message.player_name)
    session.hub.join(message.game_id, session.websocket)
    await session.broadcast_state(message.game_id)


async def on_action(session: Session, message: ActionMessage) -> None:
    outcome = session.engine.dispatch_action(message.game_id, session.player_id, message.action)
    await session.reply("actionResult", outcome.to_wire())
    await session.broadcast_state(message.game_id)


async def on_select_campaign(session: Session, message: SelectCampaignMessage) -> None:
    summary = session.engine.select_campaign(message.game_id, message.campaign_id)
    await session.hub.broadcast(message.game_id, "campaignSelected", summary)
    await session.broadcast_state(message.game_id)


async def on_spawn_monster(session: Session, message: SpawnMonsterMessage) -> None:
    monster = session.engine.spawn_monster(message.game_id, message.monster_type)
    await session.broadcast_state(message.game_id)
    await session.hub.broadcast(
        message.game_id,
        "monsterSpawned",
        {"instanceId": monster.instance_id, "type": monster.type},
    )
    if session.settings.game.monster_ai_enabled:
        session.scheduler.schedule(message.game_id, monster.instance_id)


async def on_give_item(session: Session, message: GiveItemMessage) -> None:
    session.engine.give_item(message.game_id, message.target_player_id, message.item_id)
    await session.broadcast_state(message.game_id)


async def on_use_item(session: Session, message: UseItemMessage) -> None:
    result = session.engine.use_item(message.game_id, session.player_id, message.item_id)
    await session.reply("itemUsed", result.to_wire())
    await session.broadcast_state(message.game_id)


async def on_start_dialogue(session: Session, message: StartDialogueMessage) -> None:
    node = session.engine.start_dialogue(message.dialogue_id, message.conversation_id)
    await session.reply("dialogueNode", node.to_wire())


async def on_choose_dialogue_option(session: Session, message: ChooseDialogueOptionMessage) -> None:
    result = session.engine.choose_dialogue_option(
        message.game_id,
        session.player_id,
        message.dialogue_id,
        message.conversation_id,
        message.node_id,
        message.option_index,
    )
    await session.broadcast_state(message.game_id)
    if isinstance(result, DialogueEnd):
        await session.reply("dialogueEnd")
    else:
        await session.reply("dialogueNode", result.to_wire())


async def on_export_character(session: Session, message: ExportCharacterMessage) -> None:
    character = session.engine.export_character(message.game_id, session.player_id)
    if character is None:
        await session.hub.send_error(session.websocket, "Character not found")
        return
    await session.reply("characterExport", character)


async def on_create_character(session: Session, message: CreateCharacterMessage) -> None:
    session.engine.create_character(message.game_id, session.player_id, message.character)
    await session.broadcast_state(message.game_id)


HANDLERS: dict[str, tuple[type[BaseModel], Handler]] = {
    "joinGame": (JoinGameMessage, on_join_game),
    "action": (ActionMessage, on_action),
    "selectCampaign": (SelectCampaignMessage, on_select_campaign),
    "spawnMonster": (SpawnMonsterMessage, on_spawn_monster),
    "giveItem": (GiveItemMessage, on_give_item),
    "useItem": (UseItemMessage, on_use_item),
    "startDialogue": (StartDialogueMessage, on_start_dialogue),
    "chooseDialogueOption": (ChooseDialogueOptionMessage, on_choose_dialogue_option),
    "exportCharacter": (ExportCharacterMessage, on_export_character),
    "createCharacter": (CreateCharacterMessage, on_create_character),
}


# =============================================================================
# Connection loop
# =============================================================================


async def dispatch(session: Session, data: Any) -> None:
    """Validate and handle one incoming message, reporting failures privately."""
    if not isinstance(data, dict):
        await session.hub.send_error(session.websocket, "Message must be a JSON object")
        return
    event = data.get("event")
    entry = HANDLERS.get(event) if isinstance(event, str) else None
    if entry is None:
        await session.hub.send_error(session.websocket, f"Unknown event: {event}")
        return

    model, handler = entry
    bind_context(player_id=session.player_id, ws_event=event, game_id=data.get("gameId"))
    try:
        message = model.model_validate(data)
        await handler(session, message)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        logger.info("Rejected malformed message", field=field)
        await session.hub.send_error(session.websocket, f"Invalid {event} message: {field} {error['msg']}")
    except DndEngineError as exc:
        logger.info("Request failed", error=exc.message)
        await session.hub.send_error(session.websocket, exc.message)
    finally:
        clear_context()


@router.websocket("/ws")
async def game_socket(websocket: WebSocket) -> None:
    """Serve one player connection until it closes."""
    await websocket.accept()
    state = websocket.app.state
    session = Session(
        websocket=websocket,
        player_id=uuid4().hex,
        engine=state.engine,
        hub=state.hub,
        scheduler=state.scheduler,
        settings=state.settings,
    )
    logger.info("Client connected", player_id=session.player_id)
    await session.reply("connected", {"playerId": session.player_id})

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                await session.hub.send_error(websocket, "Message is not valid JSON")
                continue
            await dispatch(session, data)
    except WebSocketDisconnect:
        logger.info("Client disconnected", player_id=session.player_id)
    finally:
        # the player stays in its games; only the socket leaves the rooms
        session.hub.leave(websocket)


__all__ = ["router", "Session", "HANDLERS", "dispatch", "game_socket"]

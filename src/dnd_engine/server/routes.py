"""REST endpoints under /api.

Read-only views of content and live game state; all game mutation goes
through the WebSocket gateway.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from dnd_engine.core.config import Settings
from dnd_engine.engine.controller import GameEngine


router = APIRouter()


def get_engine(request: Request) -> GameEngine:
    return request.app.state.engine


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/version")
async def version(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    """Server name and version."""
    return {"name": settings.app_name, "version": settings.app_version}


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/campaigns")
async def list_campaigns(engine: GameEngine = Depends(get_engine)) -> list[dict[str, str]]:
    """Summaries of every available campaign."""
    return engine.content.campaigns.list_campaigns()


@router.get("/campaigns/{campaign_id}")
async def get_campaign(campaign_id: str, engine: GameEngine = Depends(get_engine)) -> dict[str, Any]:
    campaign = engine.content.campaigns.get_campaign(campaign_id)
    if campaign is None:
        raise HTTPException(404, "Campaign not found")
    return campaign.to_wire()


@router.get("/maps")
async def list_maps(engine: GameEngine = Depends(get_engine)) -> list[dict[str, Any]]:
    return engine.content.maps.list_maps()


@router.get("/maps/{map_id}")
async def get_map(map_id: str, engine: GameEngine = Depends(get_engine)) -> dict[str, Any]:
    data = engine.content.maps.get_map(map_id)
    if data is None:
        raise HTTPException(404, "Map not found")
    return data


@router.get("/dialogues/{campaign_id}")
async def list_dialogues(campaign_id: str, engine: GameEngine = Depends(get_engine)) -> list[dict[str, Any]]:
    """Dialogue files and conversations attached to a campaign."""
    return engine.content.dialogues.dialogues_for_campaign(campaign_id)


@router.get("/dialogue/{dialogue_id}")
async def get_dialogue(dialogue_id: str, engine: GameEngine = Depends(get_engine)) -> dict[str, Any]:
    dialogue = engine.content.dialogues.get_dialogue(dialogue_id)
    if dialogue is None:
        raise HTTPException(404, "Dialogue not found")
    return dialogue.to_wire()


@router.get("/games/{game_id}")
async def get_game(game_id: str, engine: GameEngine = Depends(get_engine)) -> dict[str, Any]:
    """Snapshot of a live game."""
    state = engine.get_game_state(game_id)
    if state is None:
        raise HTTPException(404, "Game not found")
    return state


__all__ = ["router", "get_engine", "get_app_settings"]

"""FastAPI application factory.

Example:
    >>> from dnd_engine.server import create_app
    >>> app = create_app()
    >>> # uvicorn dnd_engine.server.app:create_app --factory
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dnd_engine.content import ContentLibrary
from dnd_engine.core.config import Settings, get_settings
from dnd_engine.core.logging import configure_logging, get_logger
from dnd_engine.engine.controller import GameEngine
from dnd_engine.server import routes, websocket
from dnd_engine.server.hub import ConnectionHub
from dnd_engine.server.scheduler import MonsterAIScheduler


logger = get_logger(__name__)


def create_app(settings: Settings | None = None, engine: GameEngine | None = None) -> FastAPI:
    """Build the HTTP/WebSocket application.

    Args:
        settings: Application settings; loaded from the environment if None.
        engine: Game engine; built from the configured content if None.

    Returns:
        A FastAPI app with ``engine``, ``hub``, ``scheduler`` and
        ``settings`` on ``app.state``.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)

    if engine is None:
        engine = GameEngine(content=ContentLibrary.from_settings(settings.content))
    hub = ConnectionHub()

    async def broadcast_state(game_id: str) -> None:
        await hub.broadcast(game_id, "gameState", engine.get_game_state(game_id))

    scheduler = MonsterAIScheduler(
        engine,
        interval_seconds=settings.game.monster_attack_interval_seconds,
        on_state_changed=broadcast_state,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Server starting", version=settings.app_version)
        yield
        await scheduler.cancel_all()
        logger.info("Server stopped")

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.hub = hub
    app.state.scheduler = scheduler

    app.include_router(routes.router, prefix="/api")
    app.include_router(websocket.router)
    return app


__all__ = ["create_app"]

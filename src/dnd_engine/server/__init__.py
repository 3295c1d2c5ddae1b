"""Session gateway: REST routes, WebSocket events and monster AI."""

from __future__ import annotations

from dnd_engine.server.app import create_app
from dnd_engine.server.hub import ConnectionHub
from dnd_engine.server.scheduler import MonsterAIScheduler


__all__ = ["create_app", "ConnectionHub", "MonsterAIScheduler"]

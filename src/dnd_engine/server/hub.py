"""WebSocket connection rooms.

Every connection may belong to any number of game rooms. Outgoing
messages have the shape ``{"event": name, "data": payload}``; errors are
``{"event": "error", "message": text}`` and only ever go to one socket.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from dnd_engine.core.logging import get_logger


logger = get_logger(__name__)


class ConnectionHub:
    """Tracks which sockets are in which game room."""

    def __init__(self) -> None:
        self._rooms: dict[str, set[WebSocket]] = defaultdict(set)

    def join(self, game_id: str, websocket: WebSocket) -> None:
        self._rooms[game_id].add(websocket)

    def leave(self, websocket: WebSocket) -> None:
        """Remove a socket from every room. Empty rooms are dropped."""
        for game_id in list(self._rooms):
            members = self._rooms[game_id]
            members.discard(websocket)
            if not members:
                del self._rooms[game_id]

    def members(self, game_id: str) -> int:
        return len(self._rooms.get(game_id, ()))

    async def send(self, websocket: WebSocket, event: str, data: Any = None) -> None:
        """Send one event to one socket."""
        await websocket.send_json({"event": event, "data": data})

    async def send_error(self, websocket: WebSocket, message: str) -> None:
        await websocket.send_json({"event": "error", "message": message})

    async def broadcast(self, game_id: str, event: str, data: Any = None) -> None:
        """Send an event to every socket in a room.

        A socket that fails to receive is dropped from all rooms; the other
        members still get the message.
        """
        for websocket in list(self._rooms.get(game_id, ())):
            try:
                await websocket.send_json({"event": event, "data": data})
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.warning("Dropping unreachable socket", game_id=game_id, error=str(exc))
                self.leave(websocket)


__all__ = ["ConnectionHub"]

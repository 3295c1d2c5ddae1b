"""Integration tests for the REST API and WebSocket gateway."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from dnd_engine.core.config import ContentSettings, GameSettings, Settings
from dnd_engine.engine.controller import GameEngine
from dnd_engine.server.app import create_app


pytestmark = pytest.mark.integration


@pytest.fixture
def settings(content_settings: ContentSettings) -> Settings:
    """Settings over the sample content with monster AI switched off."""
    return Settings(content=content_settings, game=GameSettings(monster_ai_enabled=False))


@pytest.fixture
def client(settings: Settings, engine: GameEngine) -> Generator[TestClient, None, None]:
    app = create_app(settings, engine)
    with TestClient(app) as test_client:
        yield test_client


def join(ws: Any, game_id: str, name: str) -> dict[str, Any]:
    """Join a game and return the broadcast state."""
    ws.send_json({"event": "joinGame", "gameId": game_id, "playerName": name})
    message = ws.receive_json()
    assert message["event"] == "gameState"
    return message["data"]


class TestRestApi:
    """Tests for the read-only /api endpoints."""

    def test_version_and_health(self, client: TestClient) -> None:
        assert client.get("/api/version").json() == {"name": "dnd-engine", "version": "0.1.0"}
        assert client.get("/api/health").json() == {"status": "ok"}

    def test_campaigns(self, client: TestClient) -> None:
        listed = client.get("/api/campaigns").json()
        assert [c["id"] for c in listed] == ["lost_mine"]

        detail = client.get("/api/campaigns/lost_mine")
        assert detail.status_code == 200
        assert detail.json()["chapters"] == ["road", "mine"]

        missing = client.get("/api/campaigns/nowhere")
        assert missing.status_code == 404
        assert missing.json() == {"detail": "Campaign not found"}

    def test_maps(self, client: TestClient) -> None:
        assert client.get("/api/maps").json() == [{"id": "road", "name": "Triboar Trail"}]
        assert client.get("/api/maps/road").json()["tiles"] == [[0, 1], [1, 0]]
        assert client.get("/api/maps/sea").status_code == 404

    def test_dialogues(self, client: TestClient) -> None:
        listed = client.get("/api/dialogues/lost_mine").json()
        assert listed == [
            {"id": "tavern", "conversations": [{"id": "barkeep", "name": "The Barkeep"}]}
        ]
        assert client.get("/api/dialogues/other").json() == []

        dialogue = client.get("/api/dialogue/tavern").json()
        assert dialogue["campaignId"] == "lost_mine"
        assert client.get("/api/dialogue/nope").status_code == 404

    def test_game_state(self, client: TestClient, engine: GameEngine) -> None:
        assert client.get("/api/games/g1").status_code == 404

        engine.join("g1", "p1", "Rowan")

        state = client.get("/api/games/g1").json()
        assert state["log"] == ["Rowan joined the game."]
        assert state["players"][0]["name"] == "Rowan"


class TestWebSocketSession:
    """Tests for a single player's WebSocket session."""

    def test_connect_and_join(self, client: TestClient, engine: GameEngine) -> None:
        with client.websocket_connect("/ws") as ws:
            connected = ws.receive_json()
            assert connected["event"] == "connected"
            player_id = connected["data"]["playerId"]

            state = join(ws, "g1", "Rowan")

        assert state["players"] == [
            {"id": player_id, "name": "Rowan", "character": None}
        ]
        assert engine.registry.get_player("g1", player_id) is not None

    def test_roll_action(self, client: TestClient, roller: Any) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            join(ws, "g1", "Rowan")
            roller.queue(17)

            ws.send_json({"event": "action", "gameId": "g1", "action": {"type": "roll"}})

            result = ws.receive_json()
            assert result == {
                "event": "actionResult",
                "data": {"message": "Rowan rolled a 17 (d20).", "result": 17},
            }
            state = ws.receive_json()
            assert state["event"] == "gameState"
            assert state["data"]["log"][-1] == "Rowan rolled a 17 (d20)."

    def test_character_lifecycle(self, client: TestClient, roller: Any) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            join(ws, "g1", "Rowan")

            ws.send_json({"event": "exportCharacter", "gameId": "g1"})
            assert ws.receive_json() == {"event": "error", "message": "Character not found"}

            roller.queue(9)
            ws.send_json(
                {
                    "event": "createCharacter",
                    "gameId": "g1",
                    "character": {"name": "Rowan", "class": "fighter"},
                }
            )
            assert ws.receive_json()["event"] == "gameState"

            ws.send_json({"event": "exportCharacter", "gameId": "g1"})
            exported = ws.receive_json()
            assert exported["event"] == "characterExport"
            assert exported["data"]["hp"] == 9

    def test_spawn_monster_without_ai(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            join(ws, "g1", "Rowan")

            ws.send_json({"event": "spawnMonster", "gameId": "g1", "monsterType": "orc"})

            state = ws.receive_json()
            spawned = ws.receive_json()
            assert state["event"] == "gameState"
            assert state["data"]["monsters"][0]["type"] == "orc"
            assert spawned["event"] == "monsterSpawned"
            assert spawned["data"]["instanceId"] == state["data"]["monsters"][0]["instanceId"]

        assert len(client.app.state.scheduler) == 0

    def test_dialogue_flow(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            join(ws, "g1", "Rowan")

            ws.send_json(
                {
                    "event": "startDialogue",
                    "gameId": "g1",
                    "dialogueId": "tavern",
                    "conversationId": "barkeep",
                }
            )
            node = ws.receive_json()
            assert node["event"] == "dialogueNode"
            assert node["data"]["nodeId"] == "greet"

            ws.send_json(
                {
                    "event": "chooseDialogueOption",
                    "gameId": "g1",
                    "dialogueId": "tavern",
                    "conversationId": "barkeep",
                    "nodeId": "greet",
                    "optionIndex": 1,
                }
            )
            assert ws.receive_json()["event"] == "gameState"
            assert ws.receive_json() == {"event": "dialogueEnd", "data": None}


class TestWebSocketErrors:
    """Failures are reported privately and the connection stays open."""

    def test_bad_messages(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()

            ws.send_json({"event": "dance", "gameId": "g1"})
            assert ws.receive_json() == {"event": "error", "message": "Unknown event: dance"}

            ws.send_json(["joinGame"])
            assert ws.receive_json() == {"event": "error", "message": "Message must be a JSON object"}

            ws.send_text("{oops")
            assert ws.receive_json() == {"event": "error", "message": "Message is not valid JSON"}

            ws.send_json({"event": "joinGame", "playerName": "Rowan"})
            invalid = ws.receive_json()
            assert invalid["event"] == "error"
            assert invalid["message"].startswith("Invalid joinGame message: ")

            # still usable after every error
            assert join(ws, "g1", "Rowan")["log"] == ["Rowan joined the game."]

    def test_engine_errors(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            join(ws, "g1", "Rowan")

            ws.send_json({"event": "selectCampaign", "gameId": "g1", "campaignId": "nowhere"})
            assert ws.receive_json() == {
                "event": "error",
                "message": "Campaign nowhere does not exist",
            }

            ws.send_json({"event": "spawnMonster", "gameId": "g1", "monsterType": "dragon"})
            assert ws.receive_json() == {
                "event": "error",
                "message": "Unknown monster type: dragon",
            }


class TestBroadcast:
    """State changes reach every socket in the game room."""

    def test_second_player_join_reaches_first(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
            first.receive_json()
            second.receive_json()
            join(first, "g1", "Rowan")

            state = join(second, "g1", "Mira")
            echoed = first.receive_json()

            assert echoed == {"event": "gameState", "data": state}
            assert [p["name"] for p in state["players"]] == ["Rowan", "Mira"]

    def test_select_campaign_broadcast(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            join(ws, "g1", "Rowan")

            ws.send_json({"event": "selectCampaign", "gameId": "g1", "campaignId": "lost_mine"})

            selected = ws.receive_json()
            assert selected["event"] == "campaignSelected"
            assert selected["data"]["name"] == "Lost Mine"
            state = ws.receive_json()
            assert state["data"]["campaign"]["id"] == "lost_mine"

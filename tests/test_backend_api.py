"""Tests for the FastAPI app: HTTP endpoints, WebSocket and shutdown save."""

import orjson
import pytest
from fastapi.testclient import TestClient

from backend.app_factory import AppContext, create_app


def make_app(tmp_path, **overrides):
    options = {
        "data_dir": str(tmp_path),
        "profile_id": "tester",
        "seed": 42,
        "auto_play": False,
        "run_loop": False,
        "allowed_origins": ["*"],
    }
    options.update(overrides)
    return create_app(context=AppContext(**options))


@pytest.fixture
def client(tmp_path):
    with TestClient(make_app(tmp_path)) as test_client:
        yield test_client


def command(client, name, data=None):
    payload = {"command": name}
    if data is not None:
        payload["data"] = data
    return client.post("/api/command", json=payload)


class TestHttp:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["phase"] == "idle"
        assert body["connected_clients"] == 0

    def test_state(self, client):
        state = client.get("/api/state").json()
        assert state["phase"] == "idle"
        assert state["profile"]["gold"] == 250
        assert state["rig"]["lights_on"] is False
        assert state["clock"]["weather"] == "CLEAR"

    def test_debug_info(self, client):
        command(client, "cast")
        info = client.get("/api/debug").json()
        assert info["phase"] == "casting"
        assert [s["name"] for s in info["systems"]] == ["ClockWeather", "EventScheduler"]
        assert info["recent_transitions"][-1]["to"] == "casting"

    def test_catalog(self, client):
        catalog = client.get("/api/catalog").json()
        assert len(catalog["species"]) == 16
        assert catalog["species"][0]["id"] == "common"
        assert [e["id"] for e in catalog["enchants"]] == ["lucky", "deep", "steady", "golden", "ancient"]
        assert catalog["rod_upgrade_price"] == 100
        assert catalog["enchant_roll_price"] == 250

    def test_cast_command(self, client):
        response = command(client, "cast")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["phase"] == "casting"
        assert body["state"]["rig"]["cast_count"] == 1

    def test_command_rejected_by_phase(self, client):
        command(client, "cast")
        body = command(client, "cast").json()
        assert body["success"] is False
        assert "casting" in body["error"]

    def test_pull_while_idle_rejected(self, client):
        body = command(client, "pull").json()
        assert body["success"] is False
        assert body["phase"] == "idle"

    def test_unknown_command_is_400(self, client):
        response = command(client, "teleport")
        assert response.status_code == 400
        assert response.json()["error"] == "Unknown command: teleport"

    def test_missing_argument_reported(self, client):
        body = command(client, "sell").json()
        assert body["success"] is False
        assert "Invalid data for sell" in body["error"]

    def test_shop_commands(self, client):
        assert command(client, "upgrade_rod").json()["success"] is True
        body = command(client, "buy_skin", {"skin_id": "carbon"}).json()
        assert body["success"] is False
        assert body["error"] == "Not enough gold!"
        state = client.get("/api/state").json()
        assert state["profile"]["rod_level"] == 2
        assert state["profile"]["gold"] == 150

    def test_auto_play_toggle(self, client):
        assert command(client, "auto_play").json()["state"]["auto_play"] is True
        assert command(client, "auto_play", {"enabled": False}).json()["state"]["auto_play"] is False


class TestWebSocket:
    def test_initial_state_then_command(self, client):
        with client.websocket_connect("/ws") as ws:
            message = orjson.loads(ws.receive_bytes())
            assert message["type"] == "state"
            assert message["state"]["phase"] == "idle"

            ws.send_text(orjson.dumps({"command": "toggle_lights"}).decode())
            reply = orjson.loads(ws.receive_bytes())
            assert reply == {
                "success": True,
                "command": "toggle_lights",
                "error": None,
                "phase": "idle",
            }

        state = client.get("/api/state").json()
        assert state["lights_on"] is True

    def test_invalid_json_reported(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_bytes()
            ws.send_text("{oops")
            reply = orjson.loads(ws.receive_bytes())
            assert reply["success"] is False

    def test_notifications_delivered_with_state(self, client):
        command(client, "toggle_lights")
        with client.websocket_connect("/ws") as ws:
            message = orjson.loads(ws.receive_bytes())
        toasts = [n["payload"]["message"] for n in message["notifications"] if n["type"] == "toast"]
        assert "Lights ON" in toasts


def test_profile_saved_on_shutdown_and_restored(tmp_path):
    with TestClient(make_app(tmp_path, autosave_debounce_seconds=60.0)) as first:
        assert command(first, "upgrade_rod").json()["success"] is True

    assert (tmp_path / "tester.json").exists()

    with TestClient(make_app(tmp_path)) as second:
        state = second.get("/api/state").json()
        assert state["profile"]["rod_level"] == 2
        assert state["profile"]["gold"] == 150

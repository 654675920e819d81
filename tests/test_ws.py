"""Tests for the WebSocket session endpoint."""

import pytest
from fastapi.testclient import TestClient

from arcanaflow.api.dependencies import get_interpreter, get_reading_store
from arcanaflow.config import settings
from arcanaflow.main import app


@pytest.fixture
def ws_client(monkeypatch, fake_interpreter, recording_store) -> TestClient:
    """Test client with fake collaborators and no chunk pacing."""
    monkeypatch.setattr(settings, "chunk_delay_ms", 0)
    app.dependency_overrides[get_interpreter] = lambda: fake_interpreter
    app.dependency_overrides[get_reading_store] = lambda: recording_store

    yield TestClient(app)

    app.dependency_overrides.clear()


class TestSessionSocket:
    def test_ping_pong(self, ws_client: TestClient) -> None:
        """Ping is answered before any session starts."""
        with ws_client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "ping"})

            assert ws.receive_json() == {"type": "pong"}

    def test_full_reading(self, ws_client: TestClient, recording_store) -> None:
        """A complete reading arrives in protocol order and is recorded."""
        with ws_client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "start_session", "query": "I am worried about my job"})
            started = ws.receive_json()
            deck = ws.receive_json()

            ws.send_json({"type": "select_card", "card_index": 0})
            selected = ws.receive_json()

            ws.send_json({"type": "request_interpretation"})
            chunks = [ws.receive_json() for _ in range(3)]
            complete = ws.receive_json()

            # Round trip guarantees the reading was stored before disconnect
            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}

        assert started["type"] == "session_started"
        assert deck["type"] == "deck_state"
        assert len(deck["card_positions"]) == 78
        assert deck["card_positions"][0] == {
            "card_id": "card_0",
            "x": 0.0,
            "y": 0.0,
            "rotation": 0.0,
            "is_face_up": False,
            "z_index": 0,
        }
        assert selected["type"] == "card_selected"
        assert isinstance(selected["is_reversed"], bool)
        assert [c["text"] for c in chunks] == ["First. ", "Second. ", "Third"]
        assert complete == {"type": "interpretation_complete"}

        (saved,) = recording_store.saved
        assert saved[0] == started["session_id"]

    def test_validation_error_keeps_connection(self, ws_client: TestClient) -> None:
        """Errors are reported in-band and the session continues."""
        with ws_client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "select_card", "card_index": 0})
            assert ws.receive_json() == {
                "type": "error",
                "message": "No session started - please start a session first",
            }

            ws.send_text("definitely not json")
            assert ws.receive_json() == {"type": "error", "message": "Malformed message"}

            ws.send_json({"type": "ping"})
            assert ws.receive_json() == {"type": "pong"}

    def test_shuffle_animation(self, ws_client: TestClient) -> None:
        """Shuffle sends one step per card with a 'from' start position."""
        with ws_client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "shuffle"})
            message = ws.receive_json()

        assert message["type"] == "shuffle_animation"
        assert len(message["sequence"]) == 78
        assert message["sequence"][0]["from"] == {"x": 0.0, "y": 0.0, "rotation": 0.0}

    def test_binary_frame(self, ws_client: TestClient) -> None:
        """Binary frames carrying JSON are accepted."""
        with ws_client.websocket_connect("/ws") as ws:
            ws.send_bytes(b'{"type": "ping"}')

            assert ws.receive_json() == {"type": "pong"}

    def test_connections_are_independent(self, ws_client: TestClient) -> None:
        """Each connection has its own session."""
        with ws_client.websocket_connect("/ws") as first:
            first.send_json({"type": "start_session", "query": "love"})
            first_id = first.receive_json()["session_id"]
            first.receive_json()

            with ws_client.websocket_connect("/ws") as second:
                second.send_json({"type": "select_card", "card_index": 0})
                assert second.receive_json()["type"] == "error"

            first.send_json({"type": "select_card", "card_index": 0})
            assert first.receive_json()["type"] == "card_selected"

        assert first_id

"""Tests for the FastAPI PerfectXO interface."""

from __future__ import annotations

import random
import time

import pytest
from fastapi.testclient import TestClient

from perfectxo.config import EngineSettings
from perfectxo.controller import GameController
from perfectxo.ui import create_app


@pytest.fixture
def client():
    settings = EngineSettings(move_delay=0.0, reset_delay=30.0)
    app = create_app(controller=GameController(settings, rng=random.Random(1)))
    # Context manager keeps one event loop alive so timers can fire
    with TestClient(app) as test_client:
        yield test_client


def _wait_for_user_turn(client: TestClient) -> dict:
    deadline = time.monotonic() + 5.0
    while True:
        state = client.get("/api/game").json()
        if state["turn"] != "computer" or time.monotonic() > deadline:
            return state
        time.sleep(0.01)


def test_idle_state_before_start(client):
    response = client.get("/api/game")
    assert response.status_code == 200
    state = response.json()
    assert state["phase"] == "idle"
    assert state["board"] == [""] * 9
    assert state["userSymbol"] is None
    assert state["message"] is None


def test_start_game_and_first_move(client):
    response = client.post("/api/game", json={"symbol": "X"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["phase"] == "playing"
    assert payload["userSymbol"] == "X"
    assert payload["computerSymbol"] == "O"
    assert payload["turn"] == "user"

    move = client.post("/api/game/move", json={"index": 4})
    assert move.status_code == 200
    state = move.json()
    assert state["board"][4] == "X"
    assert state["lastMove"] == {"player": "user", "symbol": "X", "index": 4}

    final_state = _wait_for_user_turn(client)
    assert final_state["turn"] == "user"
    assert final_state["board"].count("O") == 1
    assert final_state["moveLog"][-1]["player"] == "computer"
    assert final_state["computerPending"] is False


def test_invalid_symbol_rejected(client):
    response = client.post("/api/game", json={"symbol": "Z"})
    assert response.status_code == 400
    assert response.json()["detail"]


def test_double_start_rejected(client):
    assert client.post("/api/game", json={"symbol": "O"}).status_code == 200
    again = client.post("/api/game", json={"symbol": "X"})
    assert again.status_code == 400


def test_occupied_cell_click_is_ignored(client):
    client.post("/api/game", json={"symbol": "X"})
    client.post("/api/game/move", json={"index": 0})
    before = _wait_for_user_turn(client)

    duplicate = client.post("/api/game/move", json={"index": 0})
    assert duplicate.status_code == 200
    assert duplicate.json()["board"] == before["board"]
    assert duplicate.json()["moveLog"] == before["moveLog"]


def test_rejects_out_of_range_index(client):
    client.post("/api/game", json={"symbol": "X"})
    response = client.post("/api/game/move", json={"index": 9})
    assert response.status_code == 422


def test_preferences_let_computer_open(client):
    prefs = client.put("/api/preferences", json={"userPlaysFirst": False})
    assert prefs.status_code == 200
    assert prefs.json()["userPlaysFirst"] is False

    started = client.post("/api/game", json={"symbol": "O"}).json()
    assert started["turn"] == "computer"

    state = _wait_for_user_turn(client)
    assert state["board"].count("X") == 1
    assert state["moveLog"][0]["player"] == "computer"


def test_reset_keeps_symbols(client):
    client.post("/api/game", json={"symbol": "O"})
    client.post("/api/game/move", json={"index": 4})
    _wait_for_user_turn(client)

    response = client.post("/api/game/reset")
    assert response.status_code == 200
    state = response.json()
    assert state["phase"] == "playing"
    assert state["userSymbol"] == "O"
    assert state["board"] == [""] * 9
    assert state["moveLog"] == []

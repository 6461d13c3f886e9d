"""Tests for the FastAPI layer over an in-memory session."""

import inspect
import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest
from fastapi.testclient import TestClient

from game.config import GameConfig
from game.cues import RecordingCueEmitter
from game.session import GameSession
from game.storage import MemoryStorage
from game.logging_utils import set_session_log_dir
from app.api import main as api


@pytest.fixture
def client():
    session = GameSession(MemoryStorage(), cues=RecordingCueEmitter(), config=GameConfig(), rng=random.Random(1))
    api.set_session(session)
    yield TestClient(api.app)
    api.set_session(None)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_refused_intents_are_409(client):
    assert client.get("/state").json()["phase"] == "intro"
    assert client.post("/advance").status_code == 409
    assert client.post("/preparedness/go_bag/water").status_code == 409
    assert client.get("/report").status_code == 409
    assert client.post("/preparedness/dance").status_code == 404


def test_tutorial(client):
    assert client.post("/tutorial/start").json()["phase"] == "tutorial"
    assert client.post("/tutorial/exit").json()["phase"] == "intro"


def test_full_game_over_http(client):
    r = client.post("/game/start", json={"hazard": "fire", "difficulty": "easy"})
    assert r.status_code == 200
    assert r.json()["alert"]["agency"].startswith("BFP")
    for item in ["water", "food", "firstaid", "radio", "whistle"]:
        assert client.post(f"/preparedness/go_bag/{item}").status_code == 200
    client.post("/preparedness/center", json={"center_id": "school"})
    client.post("/preparedness/budget", json={"amount": 50000})
    client.post("/preparedness/risk_assessment")
    state = client.post("/preparedness/alert").json()
    assert state["can_advance"] is True

    state = client.post("/advance").json()
    assert state["phase"] == "phase2"
    live = state["live"]
    assert live["total_events"] == 3
    assert live["time_remaining"] == 300

    client.post("/response/evacuate")
    assert client.post("/response/evacuate").status_code == 409
    for agency in ["BFP", "PNP", "DOH"]:
        client.post("/response/agency", json={"agency": agency})
    while not state["can_advance"]:
        options = state["live"]["current_event"]["options"]
        idx = next(i for i, o in enumerate(options) if o["correct"])
        assert client.post("/response/resolve", json={"option_index": idx}).status_code == 200
        state = client.post("/response/wait", json={"seconds": 3}).json()
    assert state["live"]["status"] == "complete"

    state = client.post("/advance").json()
    assert state["phase"] == "phase3"
    assert state["response"]["response_score"] == 100
    client.post("/recovery/action/rdana")
    client.post("/recovery/action/relief")
    client.post("/recovery/task/power")
    client.post("/recovery/task/water")
    assert client.post("/advance").json()["phase"] == "report"

    report = client.get("/report").json()
    assert report["hazard"] == "fire"
    assert 0 <= report["final_score"] <= 100
    history = client.get("/history").json()
    assert len(history) == 1
    assert client.post("/play_again").json()["phase"] == "intro"
    assert client.delete("/history").json() == []
    assert client.get("/history").json() == []


def test_tick_endpoint(client):
    client.post("/game/start", json={"hazard": "volcano", "difficulty": "hard"})
    for item in ["water", "food", "firstaid", "radio", "whistle"]:
        client.post(f"/preparedness/go_bag/{item}")
    client.post("/preparedness/center", json={"center_id": "gym"})
    client.post("/preparedness/risk_assessment")
    client.post("/preparedness/alert")
    client.post("/advance")
    state = client.post("/response/tick").json()
    assert state["live"]["time_remaining"] == 149


def test_wait_is_bounded(client):
    assert client.post("/response/wait", json={"seconds": 1e9}).status_code == 422
    assert client.post("/response/wait", json={"seconds": -1}).status_code == 422
    assert client.post("/response/wait", json={"seconds": api.MAX_WAIT_S}).status_code == 200


def test_game_endpoints_run_on_the_event_loop():
    endpoints = [r.endpoint for r in api.app.routes if getattr(r, "endpoint", None) and r.endpoint.__name__.startswith("api_")]
    assert len(endpoints) > 20
    assert all(inspect.iscoroutinefunction(fn) for fn in endpoints)


def test_session_log_endpoint(client, tmp_path):
    assert client.get("/log").json() == []
    set_session_log_dir(tmp_path)
    try:
        client.post("/game/start", json={"hazard": "earthquake", "difficulty": "medium"})
        events = client.get("/log").json()
    finally:
        set_session_log_dir(None)
    assert [e["event"] for e in events] == ["game_start"]
    assert events[0]["hazard"] == "earthquake"

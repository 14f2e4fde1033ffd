import random

import pytest
from fastapi.testclient import TestClient

from agents.random_agent import play_turn
from agents.run_match import run_match
from server.app import app, GAMES


@pytest.fixture
def client():
    GAMES.clear()
    return TestClient(app)


@pytest.fixture
def match(client):
    resp = client.post("/games", json={"players": ["Ann", "Bot"], "humans": [0], "seed": 1})
    assert resp.status_code == 200
    data = resp.json()
    key = data["player_keys"]["player-0"]
    return data["game_id"], {"Authorization": f"Bearer {key}"}


def test_create_game_issues_keys_for_human_seats(client):
    data = client.post("/games", json={"players": ["A", "B", "C"], "humans": [0, 2]}).json()
    assert sorted(data["player_keys"]) == ["player-0", "player-2"]
    assert data["players"] == ["player-0", "player-1", "player-2"]
    assert [g["game_id"] for g in client.get("/games").json()] == [data["game_id"]]


def test_unknown_scenario(client):
    assert client.post("/games", json={"scenario": "atlantis"}).status_code == 400


def test_auth(client, match):
    gid, headers = match
    assert client.get(f"/games/{gid}/state", headers=headers).status_code == 200
    assert client.get(f"/games/{gid}/state", headers={"Authorization": "Bearer nope"}).status_code == 403
    assert client.get("/games/missing/state", headers=headers).status_code == 404


def test_player_state(client, match):
    gid, headers = match
    state = client.get(f"/games/{gid}/state", headers=headers).json()
    assert state["turn"] == 1
    assert state["current_player"] == "player-0"
    assert state["queue"] == ["settlers-player-0", "warrior-player-0"]
    assert {u["type"] for u in state["units"]} == {"settlers", "warrior"}
    assert "pottery" in state["available_techs"]


def test_found_city_and_set_production(client, match):
    gid, headers = match
    resp = client.post(f"/games/{gid}/units/settlers-player-0/found", headers=headers, json={})
    assert resp.json() == {"ok": True}
    city = client.get(f"/games/{gid}/state", headers=headers).json()["cities"][0]
    assert (city["x"], city["y"], city["pop"], city["name"]) == (5, 25, 1, "Rome")

    url = f"/games/{gid}/cities/{city['id']}/production"
    assert client.post(url, headers=headers, json={"item": "warrior"}).status_code == 200
    assert client.post(url, headers=headers, json={"item": "granary"}).status_code == 400
    assert client.post(url, headers=headers, json={"item": "zeppelin"}).status_code == 422

    resp = client.post(f"/games/{gid}/cities/{city['id']}/rename", headers=headers, json={"name": "Roma"})
    assert resp.status_code == 200


def test_unit_commands(client, match):
    gid, headers = match
    base = f"/games/{gid}/units"
    assert client.post(f"{base}/warrior-player-0/move", headers=headers,
                       json={"x": 7, "y": 25}).status_code == 400
    resp = client.post(f"{base}/warrior-player-0/move", headers=headers, json={"x": 6, "y": 25})
    assert resp.json()["unit"]["x"] == 6
    assert client.post(f"{base}/warrior-player-1/fortify", headers=headers).status_code == 409
    assert client.post(f"{base}/warrior-player-0/dance", headers=headers).status_code == 404
    assert client.post(f"{base}/ghost/wake", headers=headers).status_code == 404
    assert client.post(f"{base}/warrior-player-0/fortify", headers=headers).json() == {"ok": True}


def test_end_turn_runs_ai_seats(client, match):
    gid, headers = match
    resp = client.post(f"/games/{gid}/end-turn", headers=headers).json()
    assert resp == {"ok": True, "turn": 2, "current_player": "player-0"}
    view = client.get(f"/games/{gid}/spectator").json()
    founded = [e for e in view["events"] if e["event"] == "cityFounded"]
    assert founded and founded[0]["city"]["name"] == "Washington"
    later = client.get(f"/games/{gid}/spectator", params={"since": len(view["events"])}).json()
    assert later["events"] == []


def test_research_and_government(client, match):
    gid, headers = match
    url = f"/games/{gid}/research"
    assert client.post(url, headers=headers, json={"tech": "writing"}).status_code == 400
    assert client.post(url, headers=headers, json={"tech": "time_travel"}).status_code == 422
    assert client.post(url, headers=headers, json={"tech": "pottery"}).status_code == 200
    assert client.post(url, headers=headers, json={"tech": "pottery", "confirm": True}).status_code == 200
    player = client.get(f"/games/{gid}/state", headers=headers).json()["player"]
    assert player["techs"] == ["pottery"]
    assert player["science"] == 14

    gov = f"/games/{gid}/government"
    assert client.post(gov, headers=headers, json={"government": "despotism"}).status_code == 400
    turns = client.post(f"/games/{gid}/revolution", headers=headers).json()["turns"]
    assert 2 <= turns <= 5
    assert client.post(gov, headers=headers, json={"government": "despotism"}).status_code == 200


def test_pause(client, match):
    gid, headers = match
    assert client.post(f"/games/{gid}/pause", headers=headers).json() == {"phase": "paused"}
    assert client.post(f"/games/{gid}/end-turn", headers=headers).status_code == 400
    assert client.post(f"/games/{gid}/pause", headers=headers).json() == {"phase": "playing"}


def test_random_agent_plays_a_turn(client, match):
    gid, headers = match
    key = headers["Authorization"].split()[1]
    result = play_turn("http://testserver", gid, key, random.Random(0), http=client)
    assert result["ok"] and result["turn"] == 2


def test_run_match(client):
    gid = run_match("http://testserver", num_players=2, humans=[0], seed=3, max_turns=3, client=client)
    assert GAMES[gid].game.turn == 4

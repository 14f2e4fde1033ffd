"""Random agent that plays an Imperium seat via the API."""
import random
import httpx


def play_turn(base_url: str, game_id: str, api_key: str, rng: random.Random, http=httpx) -> dict:
    """Get state, issue random commands for every queued unit and idle city, end the turn.

    `http` is anything with httpx-style get/post, e.g. an httpx.Client.
    """
    headers = {"Authorization": f"Bearer {api_key}"}

    resp = http.get(f"{base_url}/games/{game_id}/state", headers=headers)
    if resp.status_code != 200:
        return {"error": resp.text}
    state = resp.json()
    pid = state["player"]["id"]
    if state["current_player"] != pid:
        return {"waiting": True, "turn": state["turn"]}
    if state["phase"] != "playing":
        return {"done": True, "phase": state["phase"]}

    width = state["map"]["width"]
    units = {u["id"]: u for u in state["units"]}
    issued = 0

    for uid in state["queue"]:
        u = units.get(uid)
        if not u:
            continue
        base = f"{base_url}/games/{game_id}/units/{uid}"
        if u["type"] == "settlers" and rng.random() < 0.6:
            r = http.post(f"{base}/found", headers=headers, json={})
            if r.status_code == 200:
                issued += 1
                continue
        if u["type"] != "settlers" and rng.random() < 0.15:
            http.post(f"{base}/fortify", headers=headers)
            issued += 1
            continue
        # one orthogonal step, wrapping horizontally
        dx, dy = rng.choice([(1, 0), (-1, 0), (0, 1), (0, -1)])
        r = http.post(f"{base}/move", headers=headers,
                       json={"x": (u["x"] + dx) % width, "y": u["y"] + dy})
        if r.status_code == 200:
            issued += 1

    for city in state["cities"]:
        if city["production"] is None:
            item = rng.choice(["warrior", "settlers", "barracks"])
            http.post(f"{base_url}/games/{game_id}/cities/{city['id']}/production",
                       headers=headers, json={"item": item})

    techs = state["available_techs"]
    if techs and state["player"]["research"] is None:
        http.post(f"{base_url}/games/{game_id}/research", headers=headers,
                   json={"tech": rng.choice(techs)})
    elif state["player"]["research"]:
        http.post(f"{base_url}/games/{game_id}/research", headers=headers,
                   json={"tech": state["player"]["research"], "confirm": True})

    resp = http.post(f"{base_url}/games/{game_id}/end-turn", headers=headers)
    result = resp.json()
    result["issued"] = issued
    return result

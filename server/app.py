"""Imperium game server (FastAPI)."""
from __future__ import annotations
import logging
import os
import secrets
import time
import uuid
from dataclasses import dataclass, field

from fastapi import FastAPI, HTTPException, Header
from pydantic import BaseModel, Field

from imperium.game import Game
from imperium.config import load_rules
from imperium.events import Event, CombatResolved
from imperium.types import GovernmentType, TechId, UnitType, BuildingType, Position
from imperium.map_gen import SCENARIOS
from imperium import views

log = logging.getLogger(__name__)

app = FastAPI(title="Imperium", version="1.0.0")

# ── Data stores ──────────────────────────────────────────────────────────────

@dataclass
class GameInstance:
    id: str
    game: Game
    player_keys: dict[str, str]
    spectator_key: str
    event_log: list[dict] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)

    def record(self, event: Event):
        entry = {"turn": self.game.turn, "event": event.name}
        if isinstance(event, CombatResolved):
            entry["combat"] = views.combat_dict(event.result)
        for attr in ("player_id", "tech", "government", "turns", "population"):
            value = getattr(event, attr, None)
            if value is not None:
                entry[attr] = getattr(value, "value", value)
        for attr, dump in (("unit", views.unit_dict), ("city", lambda c: {"id": c.id, "name": c.name})):
            obj = getattr(event, attr, None)
            if obj is not None:
                entry[attr] = dump(obj)
        self.event_log.append(entry)

GAMES: dict[str, GameInstance] = {}

# ── Auth ─────────────────────────────────────────────────────────────────────

def get_game(game_id: str) -> GameInstance:
    gi = GAMES.get(game_id)
    if not gi:
        raise HTTPException(404, "Game not found")
    return gi

def get_player(game_id: str, authorization: str) -> tuple[GameInstance, str]:
    token = authorization.replace("Bearer ", "")
    gi = get_game(game_id)
    for pid, key in gi.player_keys.items():
        if secrets.compare_digest(key, token):
            return gi, pid
    raise HTTPException(403, "Invalid API key")

def require_turn(gi: GameInstance, pid: str):
    if gi.game.state.current_player_id != pid:
        raise HTTPException(409, "Not your turn")

def own_unit(gi: GameInstance, pid: str, unit_id: str):
    unit = gi.game.state.unit(unit_id)
    if not unit:
        raise HTTPException(404, "Unit not found")
    if unit.owner_id != pid:
        raise HTTPException(409, "Not your unit")
    return unit

def own_city(gi: GameInstance, pid: str, city_id: str):
    city = gi.game.state.city(city_id)
    if not city:
        raise HTTPException(404, "City not found")
    if city.owner_id != pid:
        raise HTTPException(409, "Not your city")
    return city

def check(ok) -> dict:
    if ok is False or ok is None:
        raise HTTPException(400, "Command rejected")
    return {"ok": True}

# ── Models ───────────────────────────────────────────────────────────────────

class CreateGameRequest(BaseModel):
    players: list[str] = Field(default_factory=lambda: ["Player", "Computer"], min_length=1)
    humans: list[int] = [0]
    scenario: str = "grassland"
    seed: int | None = None

class MoveRequest(BaseModel):
    x: int
    y: int

class FoundCityRequest(BaseModel):
    name: str | None = None

class AttackRequest(BaseModel):
    defender_id: str

class ProductionRequest(BaseModel):
    item: UnitType | BuildingType

class RenameRequest(BaseModel):
    name: str = Field(min_length=1)

class ResearchRequest(BaseModel):
    tech: TechId
    confirm: bool = False  # False only sets the research target

class GovernmentRequest(BaseModel):
    government: GovernmentType

# ── Games ────────────────────────────────────────────────────────────────────

@app.post("/games")
def create_game(req: CreateGameRequest):
    if req.scenario not in SCENARIOS:
        raise HTTPException(400, f"Unknown scenario {req.scenario!r}")
    gid = str(uuid.uuid4())[:8]
    game = Game(rules=load_rules(), rng=req.seed)
    gi = GameInstance(id=gid, game=game, player_keys={}, spectator_key=secrets.token_hex(16))
    game.bus.subscribe_all(gi.record)
    game.initialize_game(req.players, req.scenario, humans=req.humans)
    gi.player_keys = {p.id: secrets.token_hex(16) for p in game.state.players if p.is_human}
    GAMES[gid] = gi
    log.info("Created game %s with %d players", gid, len(req.players))
    return {
        "game_id": gid,
        "player_keys": gi.player_keys,
        "spectator_key": gi.spectator_key,
        "players": [p.id for p in game.state.players],
    }

@app.get("/games")
def list_games():
    return [{"game_id": gid, "turn": gi.game.turn, "phase": gi.game.state.phase.value,
             "players": len(gi.game.state.players)} for gid, gi in GAMES.items()]

@app.get("/games/{game_id}/state")
def get_state(game_id: str, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    state = gi.game.get_player_view(pid)
    state["game_id"] = game_id
    return state

@app.get("/games/{game_id}/spectator")
def get_spectator_state(game_id: str, since: int = 0):
    gi = get_game(game_id)
    state = gi.game.get_full_state()
    state["game_id"] = game_id
    state["events"] = gi.event_log[since:]
    return state

@app.post("/games/{game_id}/end-turn")
def end_turn(game_id: str, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    require_turn(gi, pid)
    check(gi.game.end_turn())
    return {"ok": True, "turn": gi.game.turn, "current_player": gi.game.state.current_player_id}

@app.post("/games/{game_id}/pause")
def toggle_pause(game_id: str, authorization: str = Header(...)):
    gi, _ = get_player(game_id, authorization)
    return {"phase": gi.game.toggle_pause().value}

# ── Units ────────────────────────────────────────────────────────────────────

@app.post("/games/{game_id}/units/{unit_id}/move")
def move_unit(game_id: str, unit_id: str, req: MoveRequest, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    require_turn(gi, pid)
    unit = own_unit(gi, pid, unit_id)
    check(gi.game.move_unit(unit_id, Position(req.x, req.y)))
    return {"ok": True, "unit": views.unit_dict(unit)}

@app.post("/games/{game_id}/units/{unit_id}/found")
def found_city(game_id: str, unit_id: str, req: FoundCityRequest, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    require_turn(gi, pid)
    own_unit(gi, pid, unit_id)
    return check(gi.game.found_city(unit_id, req.name))

@app.post("/games/{game_id}/units/{unit_id}/attack")
def attack_unit(game_id: str, unit_id: str, req: AttackRequest, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    require_turn(gi, pid)
    own_unit(gi, pid, unit_id)
    result = gi.game.attack_unit(unit_id, req.defender_id)
    check(result)
    return {"ok": True, "combat": views.combat_dict(result)}

@app.post("/games/{game_id}/units/{unit_id}/{action}")
def unit_action(game_id: str, unit_id: str, action: str, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    commands = {
        "fortify": gi.game.fortify_unit,
        "wake": gi.game.wake_unit,
        "sleep": gi.game.sleep_unit,
        "road": gi.game.build_road,
    }
    if action not in commands:
        raise HTTPException(404, f"Unknown action {action!r}")
    require_turn(gi, pid)
    own_unit(gi, pid, unit_id)
    return check(commands[action](unit_id))

# ── Cities ───────────────────────────────────────────────────────────────────

@app.post("/games/{game_id}/cities/{city_id}/production")
def set_production(game_id: str, city_id: str, req: ProductionRequest, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    own_city(gi, pid, city_id)
    return check(gi.game.set_city_production(city_id, req.item))

@app.post("/games/{game_id}/cities/{city_id}/rename")
def rename_city(game_id: str, city_id: str, req: RenameRequest, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    own_city(gi, pid, city_id)
    return check(gi.game.rename_city(city_id, req.name))

# ── Research & government ────────────────────────────────────────────────────

@app.post("/games/{game_id}/research")
def research(game_id: str, req: ResearchRequest, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    if req.confirm:
        return check(gi.game.research_technology(pid, req.tech))
    return check(gi.game.set_current_research(pid, req.tech))

@app.post("/games/{game_id}/revolution")
def revolution(game_id: str, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    check(gi.game.start_revolution(pid))
    return {"ok": True, "turns": gi.game.state.player(pid).revolution_turns_remaining}

@app.post("/games/{game_id}/government")
def change_government(game_id: str, req: GovernmentRequest, authorization: str = Header(...)):
    gi, pid = get_player(game_id, authorization)
    return check(gi.game.change_government(pid, req.government))


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=os.environ.get("IMPERIUM_LOG_LEVEL", "INFO"))
    uvicorn.run(app, host="0.0.0.0", port=8000)

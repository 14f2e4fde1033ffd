"""JSON-ready views of the game state for players and spectators."""
from __future__ import annotations
from typing import TYPE_CHECKING

from .types import Unit, City, Player, Position, CombatResult
from . import ledger, tech

if TYPE_CHECKING:
    from .game import Game


def pos_dict(pos: Position) -> dict:
    return {"x": pos.x, "y": pos.y}


def unit_dict(u: Unit) -> dict:
    return {
        "id": u.id, "owner": u.owner_id, "type": u.type.value, **pos_dict(u.position),
        "mp": u.movement_points, "max_mp": u.max_movement_points,
        "hp": u.health, "veteran": u.is_veteran, "xp": u.experience,
        "state": u.fortification.value,
    }


def city_dict(game: Game, c: City) -> dict:
    owner = game.state.player(c.owner_id)
    y = ledger.city_yields(c, owner, game.grid, game.rules)
    order = c.current_production
    return {
        "id": c.id, "owner": c.owner_id, "name": c.name, **pos_dict(c.position),
        "pop": c.population, "food": c.food, "food_box": game.rules.food_box(c.population),
        "shields": c.production_points, "buildings": [b.value for b in c.buildings],
        "production": {"kind": order.kind.value, "item": order.item.value,
                       "turns": order.turns_remaining} if order else None,
        "worked": sorted(c.worked_tiles),
        "yield": {"food": y.food, "shields": y.production, "trade": y.trade,
                  "science": y.science, "gold": y.gold},
    }


def player_dict(p: Player) -> dict:
    return {
        "id": p.id, "name": p.name, "human": p.is_human, "civ": p.civilization,
        "color": p.color, "government": p.government.value,
        "techs": sorted(t.value for t in p.technologies),
        "science": p.science, "gold": p.gold, "culture": p.culture,
        "research": p.current_research.value if p.current_research else None,
        "research_progress": p.current_research_progress,
        "revolution": p.revolution_turns_remaining,
    }


def combat_dict(r: CombatResult) -> dict:
    return {
        "attacker": r.attacker_id, "defender": r.defender_id,
        "attacker_survived": r.attacker_survived, "defender_survived": r.defender_survived,
        "attacker_delta": r.attacker_health_delta, "defender_delta": r.defender_health_delta,
        "rounds": r.rounds,
    }


def player_view(game: Game, pid: str) -> dict:
    """What one player needs to act: own units, cities, options, and nearby foreign units."""
    state = game.state
    player = state.player(pid)
    if player is None:
        return {}
    own_cities = state.player_cities(pid)
    own_units = state.player_units(pid)
    watchers = [u.position for u in own_units] + [c.position for c in own_cities]
    sight = 2
    visible = [u for u in state.units if u.owner_id != pid and any(
        game.grid.wrapped_distance(w, u.position) <= sight for w in watchers)]
    return {
        "turn": state.turn,
        "phase": state.phase.value,
        "current_player": state.current_player_id,
        "player": player_dict(player),
        "units": [unit_dict(u) for u in own_units],
        "queue": list(game.queue.unit_ids) if state.current_player_id == pid else [],
        "cities": [city_dict(game, c) for c in own_cities],
        "foreign_units": [unit_dict(u) for u in visible],
        "available_techs": [t.value for t in tech.available_techs(player.technologies)],
        "governments": [g.value for g in tech.available_governments(player.technologies)],
        "map": {"width": game.grid.width, "height": game.grid.height},
    }


def full_state(game: Game) -> dict:
    """Full state for spectators."""
    state = game.state
    return {
        "turn": state.turn,
        "phase": state.phase.value,
        "current_player": state.current_player_id,
        "players": [player_dict(p) for p in state.players],
        "units": [unit_dict(u) for u in state.units],
        "cities": [city_dict(game, c) for c in state.cities],
        "wonders": {w.value: cid for w, cid in state.wonders.items()},
        "map": {"width": game.grid.width, "height": game.grid.height},
    }

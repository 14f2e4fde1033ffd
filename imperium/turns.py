"""Turn manager: the per-player turn-start tick and round-robin rotation."""
from __future__ import annotations
import logging
import random

from .config import Rules
from .events import (
    EventBus, UnitCreated, CityGrew, ProductionCompleted, GovernmentChanged,
)
from .types import (
    GameState, Player, City, UnitType, GovernmentType,
    FortificationState, BUILDING_STATS,
)
from . import ledger, units

log = logging.getLogger(__name__)


class TurnManager:
    def __init__(self, rules: Rules, bus: EventBus, rng: random.Random):
        self.rules = rules
        self.bus = bus
        self.rng = rng

    def advance(self, state: GameState) -> Player:
        """Tick the next player, then make them current. Returns the new current player."""
        idx = state.player_index(state.current_player_id)
        nxt_idx = (idx + 1) % len(state.players)
        nxt = state.players[nxt_idx]
        self.begin_player_turn(state, nxt)
        state.current_player_id = nxt.id
        if nxt_idx == 0:
            state.turn += 1
            log.info("── Turn %d ──", state.turn)
        return nxt

    def begin_player_turn(self, state: GameState, player: Player) -> None:
        self._refresh_units(state, player)
        for city in list(state.player_cities(player.id)):
            self._grow(state, player, city)
            self._produce(state, player, city)
        ledger.collect_income(player, state, state.grid, self.rules)
        self._tick_revolution(player)

    # ── Units ────────────────────────────────────────────────────────────

    def _refresh_units(self, state: GameState, player: Player):
        city_tiles = {c.position for c in state.player_cities(player.id)}
        for unit in state.player_units(player.id):
            if unit.fortification == FortificationState.BUILDING_ROAD:
                if units.advance_road(unit, state.grid, self.rules.road_build_turns):
                    log.debug("%s finished a road at (%d,%d)", unit.id, unit.position.x, unit.position.y)
            if unit.fortification == FortificationState.FORTIFIED or unit.position in city_tiles:
                units.heal(unit, self.rules.heal_per_turn)
            units.refresh(unit)

    # ── Cities ───────────────────────────────────────────────────────────

    def _grow(self, state: GameState, player: Player, city: City):
        change = ledger.grow_city(city, player, state, state.grid, self.rules)
        if change:
            log.info("%s %s to size %d", city.name, "grew" if change > 0 else "starved", city.population)
            self.bus.publish(CityGrew(city=city, population=city.population))

    def _produce(self, state: GameState, player: Player, city: City):
        item = ledger.advance_production(city, self.rules)
        if item is None:
            return
        if isinstance(item, UnitType):
            veteran = any(BUILDING_STATS[b].veteran_units for b in city.buildings)
            unit = units.new_unit(state, item, city.position, player.id, veteran=veteran)
            state.units.append(unit)
            self.bus.publish(UnitCreated(unit=unit))
        else:
            city.buildings.append(item)
            if BUILDING_STATS[item].wonder:
                state.wonders[item] = city.id
        log.info("%s completed %s", city.name, item.value)
        self.bus.publish(ProductionCompleted(city=city, item=item))

    # ── Government ───────────────────────────────────────────────────────

    def start_revolution(self, player: Player) -> int:
        turns = self.rng.randint(self.rules.revolution_min_turns, self.rules.revolution_max_turns)
        player.government = GovernmentType.ANARCHY
        player.revolution_turns_remaining = turns
        player.target_government = None
        return turns

    def _tick_revolution(self, player: Player):
        if not player.in_anarchy or player.revolution_turns_remaining is None:
            return
        player.revolution_turns_remaining -= 1
        if player.revolution_turns_remaining > 0:
            return
        player.government = player.target_government or GovernmentType.DESPOTISM
        player.revolution_turns_remaining = None
        player.target_government = None
        log.info("%s adopts %s", player.name, player.government.value)
        self.bus.publish(GovernmentChanged(player_id=player.id, government=player.government))

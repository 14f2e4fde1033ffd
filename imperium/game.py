"""Core game engine for Imperium: the command facade over the game state."""
from __future__ import annotations
import logging
import random
from typing import Callable, Iterable

from .config import Rules, load_rules
from .events import (
    EventBus, Event, GameInitialized, TurnEnded, UnitMoved, UnitCreated, UnitDestroyed,
    UnitFortified, UnitWoken, CityFounded, CityRenamed, CityProductionChanged, CombatResolved,
    UnitSelected, UnitDeselected, UnitBlink, EndOfTurn, GamePhaseChanged, ResearchTargetSet,
    TechnologyResearched, RevolutionStarted,
)
from .types import (
    GameState, GamePhase, Player, Unit, City, Position, UnitType, BuildingType, TechId,
    GovernmentType, CombatResult, ImprovementKind, FortificationState, BUILDING_STATS, UNIT_STATS,
)
from .world import WorldGrid
from .unit_queue import UnitQueue
from .turns import TurnManager
from .ai import AIPlayer
from .combat import TerrainContext, resolve
from .civs import civ_for_index, get_civ_info, next_city_name
from .map_gen import build_scenario, start_positions
from . import ledger, tech, units, views

log = logging.getLogger(__name__)


def _as_position(pos: Position | tuple[int, int]) -> Position:
    return pos if isinstance(pos, Position) else Position(*pos)


class Game:
    """Holds the canonical GameState. All mutation goes through the commands below.

    Commands report expected failures by returning False or None. Unknown enum
    names (technologies, governments, unit or building types) raise ValueError.
    """

    def __init__(self, rules: Rules | None = None, rng: random.Random | int | None = None):
        self.rules = rules or load_rules()
        self.rng = rng if isinstance(rng, random.Random) else random.Random(rng)
        self.bus = EventBus()
        self.state = GameState()
        self.queue = UnitQueue()
        self.turns = TurnManager(self.rules, self.bus, self.rng)
        self._awaiting_ai = False
        self.ai = AIPlayer(self, self.rng)

    @classmethod
    def create(cls, player_names: list[str], scenario: str | WorldGrid = "grassland",
               humans: Iterable[int] = (0,), seed: int | None = None,
               rules: Rules | None = None) -> Game:
        game = cls(rules=rules, rng=seed)
        game.initialize_game(player_names, scenario, humans)
        return game

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def grid(self) -> WorldGrid:
        return self.state.grid

    @property
    def turn(self) -> int:
        return self.state.turn

    @property
    def current_player(self) -> Player | None:
        return self.state.current_player

    @property
    def current_unit(self) -> Unit | None:
        return self.queue.current(self.state)

    def subscribe(self, event_type: type[Event], handler: Callable) -> Callable[[], None]:
        return self.bus.subscribe(event_type, handler)

    def is_valid_city_site(self, pos: Position) -> bool:
        pos = self.grid.normalize(pos)
        if not self.grid.can_found_city(pos) or self.state.city_at(pos):
            return False
        spacing = self.rules.city_spacing(self.state.turn)
        return all(self.grid.wrapped_distance(pos, c.position) >= spacing for c in self.state.cities)

    def get_available_technologies(self, player_id: str) -> list[TechId]:
        player = self.state.player(player_id)
        return tech.available_techs(player.technologies) if player else []

    def get_available_governments(self, player_id: str) -> list[GovernmentType]:
        player = self.state.player(player_id)
        return tech.available_governments(player.technologies) if player else []

    def get_available_production(self, city_id: str) -> list[UnitType | BuildingType]:
        city = self.state.city(city_id)
        if not city:
            return []
        return ledger.available_production(city, self.state.player(city.owner_id), self.state)

    def get_player_view(self, player_id: str) -> dict:
        return views.player_view(self, player_id)

    def get_full_state(self) -> dict:
        return views.full_state(self)

    # ── Setup ────────────────────────────────────────────────────────────

    def initialize_game(self, player_names: list[str], scenario: str | WorldGrid = "grassland",
                        humans: Iterable[int] = (0,)) -> GameState:
        if not player_names:
            raise ValueError("At least one player is required")
        humans = set(humans)
        grid = scenario if isinstance(scenario, WorldGrid) else build_scenario(scenario, self.rules, self.rng)
        players = []
        for i, name in enumerate(player_names):
            civ = civ_for_index(i)
            players.append(Player(
                id=f"player-{i}", name=name, is_human=i in humans,
                color=get_civ_info(civ)["color"], civilization=civ,
                science=self.rules.starting_science, gold=self.rules.starting_gold,
            ))
        self.state = GameState(turn=1, players=players, grid=grid, phase=GamePhase.SETUP)
        for player, pos in zip(players, start_positions(grid, len(players))):
            for utype in (UnitType.SETTLERS, UnitType.WARRIOR):
                self.state.units.append(units.new_unit(
                    self.state, utype, pos, player.id, unit_id=f"{utype.value}-{player.id}"))
        self.state.current_player_id = players[0].id
        self._awaiting_ai = False
        self._set_phase(GamePhase.PLAYING)
        self.queue.rebuild(self.state, self.state.current_player_id)
        log.info("Game started: %d players on a %dx%d map", len(players), grid.width, grid.height)
        self.bus.publish(GameInitialized(state=self.state))
        self._run_ai_turns()
        return self.state

    # ── Turn flow ────────────────────────────────────────────────────────

    def end_turn(self) -> bool:
        if self.state.phase != GamePhase.PLAYING:
            return False
        if self._awaiting_ai:
            # all-AI game paused at a round boundary: play the seat before rotating
            self._awaiting_ai = False
            self.ai.play_turn(self.state.current_player)
        self._rotate()
        self._run_ai_turns()
        return True

    def _rotate(self):
        self._deselect()
        player = self.turns.advance(self.state)
        self.queue.rebuild(self.state, player.id)
        self.bus.publish(TurnEnded(state=self.state))

    def _run_ai_turns(self):
        all_ai = not any(p.is_human for p in self.state.players)
        while self.state.phase == GamePhase.PLAYING:
            player = self.state.current_player
            if player.is_human:
                self._select_current()
                return
            if all_ai and self.state.player_index(player.id) == 0:
                self._awaiting_ai = True
                return
            self.ai.play_turn(player)
            self._rotate()

    def toggle_pause(self) -> GamePhase:
        if self.state.phase == GamePhase.PLAYING:
            self._set_phase(GamePhase.PAUSED)
        elif self.state.phase == GamePhase.PAUSED:
            self._set_phase(GamePhase.PLAYING)
        return self.state.phase

    def _set_phase(self, phase: GamePhase):
        self.state.phase = phase
        self.bus.publish(GamePhaseChanged(phase=phase))

    # ── Unit queue ───────────────────────────────────────────────────────

    def _select_current(self):
        unit = self.queue.current(self.state)
        if unit:
            self.bus.publish(UnitSelected(unit=unit, index=self.queue.index, total=len(self.queue)))

    def _deselect(self):
        self.queue.clear()
        self.bus.publish(UnitDeselected())

    def _dequeue(self, unit_id: str):
        was_current = self.queue.current_id == unit_id
        if not self.queue.remove(unit_id):
            return
        if not self.queue.unit_ids:
            self.bus.publish(UnitDeselected())
            self.bus.publish(EndOfTurn(player_id=self.queue.player_id))
        elif was_current:
            self._select_current()

    def select_next_unit(self) -> Unit | None:
        if self.queue.next() is None:
            return None
        self._select_current()
        return self.current_unit

    def select_previous_unit(self) -> Unit | None:
        if self.queue.previous() is None:
            return None
        self._select_current()
        return self.current_unit

    def blink_unit(self) -> bool:
        unit = self.current_unit
        if not unit:
            return False
        self.bus.publish(UnitBlink(unit=unit))
        return True

    # ── Unit commands ────────────────────────────────────────────────────

    def create_unit(self, unit_type: UnitType | str, position: Position | tuple[int, int],
                    player_id: str) -> Unit | None:
        player = self.state.player(player_id)
        if not player:
            log.debug("create_unit: unknown player %s", player_id)
            return None
        unit_type = UnitType(unit_type)
        req = UNIT_STATS[unit_type].tech
        if req is not None and req not in player.technologies:
            log.debug("%s lacks %s for %s", player_id, req.value, unit_type.value)
            return None
        pos = self.grid.normalize(_as_position(position))
        unit = units.new_unit(self.state, unit_type, pos, player_id)
        if not units.can_enter(unit, self.grid, pos):
            log.debug("%s cannot stand at (%d,%d)", unit_type.value, pos.x, pos.y)
            return None
        self.state.units.append(unit)
        if player_id == self.state.current_player_id and units.is_queueable(unit):
            self.queue.unit_ids.append(unit.id)
            if self.queue.index < 0:
                self.queue.index = 0
        self.bus.publish(UnitCreated(unit=unit))
        return unit

    def move_unit(self, unit_id: str, position: Position | tuple[int, int]) -> bool:
        """Straight-line move: costs the wrapped distance, ignores terrain costs and obstacles."""
        unit = self.state.unit(unit_id)
        if not unit or unit.movement_points <= 0:
            log.debug("%s is missing or has no movement left", unit_id)
            return False
        target = self.grid.normalize(_as_position(position))
        distance = self.grid.wrapped_distance(unit.position, target)
        if distance > unit.movement_points or not units.can_enter(unit, self.grid, target):
            log.debug("%s cannot move to (%d,%d)", unit_id, target.x, target.y)
            return False
        if any(u.owner_id != unit.owner_id for u in self.state.units_at(target)):
            log.debug("%s blocked by enemy units at (%d,%d)", unit_id, target.x, target.y)
            return False
        city = self.state.city_at(target)
        if city and city.owner_id != unit.owner_id:
            log.debug("%s cannot enter foreign city %s", unit_id, city.name)
            return False
        unit.position = target
        units.spend_movement(unit, distance)
        self.bus.publish(UnitMoved(unit=unit, new_position=target))
        if unit.movement_points == 0:
            self._dequeue(unit.id)
        return True

    def fortify_unit(self, unit_id: str) -> bool:
        unit = self.state.unit(unit_id)
        if not unit or not units.start_fortifying(unit):
            log.debug("%s cannot fortify", unit_id)
            return False
        self._dequeue(unit.id)
        self.bus.publish(UnitFortified(unit=unit))
        return True

    def wake_unit(self, unit_id: str) -> bool:
        unit = self.state.unit(unit_id)
        if not unit:
            log.debug("wake: no unit %s", unit_id)
            return False
        if units.wake(unit):
            self.bus.publish(UnitWoken(unit=unit))
        return True

    def sleep_unit(self, unit_id: str) -> bool:
        unit = self.state.unit(unit_id)
        if not unit or unit.fortification != FortificationState.ACTIVE:
            log.debug("%s cannot sleep", unit_id)
            return False
        units.put_to_sleep(unit)
        self._dequeue(unit.id)
        return True

    def build_road(self, unit_id: str) -> bool:
        unit = self.state.unit(unit_id)
        if not unit or not units.start_road(unit, self.grid):
            log.debug("%s cannot build a road here", unit_id)
            return False
        self._dequeue(unit.id)
        return True

    def attack_unit(self, attacker_id: str, defender_id: str) -> CombatResult | None:
        attacker = self.state.unit(attacker_id)
        defender = self.state.unit(defender_id)
        if not attacker or not defender or attacker.owner_id == defender.owner_id:
            log.debug("%s cannot attack %s: missing unit or same owner", attacker_id, defender_id)
            return None
        if not attacker.stats.can_attack or attacker.movement_points <= 0:
            log.debug("%s cannot attack now", attacker_id)
            return None
        if not self.grid.is_adjacent(attacker.position, defender.position):
            log.debug("%s is not adjacent to %s", attacker_id, defender_id)
            return None

        tile = self.grid.tile(defender.position)
        city = self.state.city_at(defender.position)
        walls = 1.0
        if city and city.owner_id == defender.owner_id:
            for b in city.buildings:
                walls *= BUILDING_STATS[b].defense
        ctx = TerrainContext(terrain=tile.terrain, fortress=tile.has(ImprovementKind.FORTRESS),
                             city_defense=walls)
        result = resolve(attacker, defender, ctx, self.rng, self.rules)

        attacker.health += result.attacker_health_delta
        defender.health += result.defender_health_delta
        attacker.movement_points = 0
        self._dequeue(attacker.id)
        if not result.defender_survived:
            self._remove_unit(defender)
            if result.attacker_survived:
                attacker.experience += self.rules.kill_experience
                attacker.is_veteran = True
        if not result.attacker_survived:
            self._remove_unit(attacker)
        log.info("%s attacked %s: %s", attacker_id, defender_id,
                 "attacker won" if result.attacker_survived else "defender held")
        self.bus.publish(CombatResolved(result=result))
        return result

    def _remove_unit(self, unit: Unit):
        self.state.units.remove(unit)
        self._dequeue(unit.id)
        self.bus.publish(UnitDestroyed(unit=unit))

    # ── City commands ────────────────────────────────────────────────────

    def found_city(self, unit_id: str, name: str | None = None) -> bool:
        unit = self.state.unit(unit_id)
        if not unit or unit.type != UnitType.SETTLERS:
            log.debug("%s is not a settler", unit_id)
            return False
        if not self.is_valid_city_site(unit.position):
            log.debug("%s: (%d,%d) is not a valid city site", unit_id, unit.position.x, unit.position.y)
            return False
        player = self.state.player(unit.owner_id)
        name = (name or "").strip() or next_city_name(player, self.rng, self.rules.name_attempts)
        if name in player.used_city_names:
            log.debug("%s already has a city named %s", player.id, name)
            return False
        city = City(id=self.state.next_id("city"), owner_id=player.id, name=name,
                    position=unit.position)
        self.state.cities.append(city)
        player.used_city_names.add(name)
        ledger.release_tile(self.state, self.grid, city.position, self.rules)
        ledger.assign_worked_tiles(city, self.state, self.grid, self.rules)
        self.state.units.remove(unit)
        self._dequeue(unit.id)
        log.info("%s founded %s at (%d,%d)", player.name, name, city.position.x, city.position.y)
        self.bus.publish(CityFounded(city=city))
        return True

    def set_city_production(self, city_id: str, item: UnitType | BuildingType | str) -> bool:
        city = self.state.city(city_id)
        if not city:
            log.debug("set_city_production: no city %s", city_id)
            return False
        item = ledger.parse_item(item)
        player = self.state.player(city.owner_id)
        current = city.current_production
        if current and current.item == item:
            return True
        if not ledger.can_build(city, player, self.state, item):
            log.debug("%s cannot build %s", city.name, item.value)
            return False
        if current:
            city.production_points = 0
        city.current_production = ledger.make_order(city, item, self.rules)
        self.bus.publish(CityProductionChanged(city=city, order=city.current_production))
        return True

    def rename_city(self, city_id: str, name: str) -> bool:
        city = self.state.city(city_id)
        name = (name or "").strip()
        if not city or not name:
            log.debug("rename_city: no city %s or empty name", city_id)
            return False
        player = self.state.player(city.owner_id)
        if name in player.used_city_names:
            log.debug("%s already has a city named %s", player.id, name)
            return False
        old = city.name
        player.used_city_names.discard(old)
        player.used_city_names.add(name)
        city.name = name
        self.bus.publish(CityRenamed(city=city, old_name=old))
        return True

    # ── Research & government ────────────────────────────────────────────

    def set_current_research(self, player_id: str, tech_id: TechId | str) -> bool:
        player = self.state.player(player_id)
        tech_id = TechId(tech_id)
        if not player or not tech.can_research(player.technologies, tech_id):
            log.debug("%s cannot research %s", player_id, tech_id.value)
            return False
        player.current_research = tech_id
        player.current_research_progress = min(player.science, tech.tech_cost(tech_id))
        self.bus.publish(ResearchTargetSet(player_id=player_id, tech=tech_id))
        return True

    def research_technology(self, player_id: str, tech_id: TechId | str) -> bool:
        player = self.state.player(player_id)
        tech_id = TechId(tech_id)
        if not player or not ledger.research(player, tech_id):
            log.debug("%s cannot complete %s", player_id, tech_id.value)
            return False
        log.info("%s discovered %s", player.name, tech_id.value)
        self.bus.publish(TechnologyResearched(player_id=player_id, tech=tech_id))
        return True

    def start_revolution(self, player_id: str) -> bool:
        player = self.state.player(player_id)
        if self.state.phase != GamePhase.PLAYING or not player or player.in_anarchy:
            log.debug("%s cannot start a revolution now", player_id)
            return False
        turns = self.turns.start_revolution(player)
        log.info("%s falls into anarchy for %d turns", player.name, turns)
        self.bus.publish(RevolutionStarted(player_id=player_id, turns=turns))
        return True

    def change_government(self, player_id: str, government: GovernmentType | str) -> bool:
        """Choose the government a revolution will settle on once anarchy ends."""
        player = self.state.player(player_id)
        government = GovernmentType(government)
        if not player or not player.in_anarchy:
            log.debug("%s is not in anarchy", player_id)
            return False
        if government not in tech.available_governments(player.technologies):
            log.debug("%s cannot adopt %s", player_id, government.value)
            return False
        player.target_government = government
        return True

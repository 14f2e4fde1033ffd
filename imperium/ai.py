"""Heuristic AI for computer players.

The AI only acts through the game's public commands, and treats a rejected
command as a cue to fall back to its next option.
"""
from __future__ import annotations
import logging
import random
from typing import TYPE_CHECKING

from .types import (
    Player, Unit, City, Position, TerrainKind, UnitType, UnitRole, BuildingType,
    FortificationState, unit_role,
)
from . import tech, units

if TYPE_CHECKING:
    from .game import Game

log = logging.getLogger(__name__)

INFRASTRUCTURE = [
    BuildingType.GRANARY, BuildingType.BARRACKS, BuildingType.TEMPLE, BuildingType.LIBRARY,
    BuildingType.MARKETPLACE, BuildingType.CITY_WALLS, BuildingType.AQUEDUCT,
]

SITE_TERRAIN_BONUS = {
    TerrainKind.RIVER: 5,
    TerrainKind.GRASSLAND: 3,
    TerrainKind.HILLS: 2,
}


class AIPlayer:
    def __init__(self, game: Game, rng: random.Random):
        self.game = game
        self.rng = rng

    @property
    def state(self):
        return self.game.state

    @property
    def rules(self):
        return self.game.rules

    def is_early_game(self) -> bool:
        return self.state.turn <= self.rules.early_game_turn

    # ── Turn ─────────────────────────────────────────────────────────────

    def play_turn(self, player: Player) -> None:
        log.debug("AI %s starting turn %d", player.id, self.state.turn)
        self.manage_research(player)
        for unit in list(self.state.player_units(player.id)):
            if self.state.unit(unit.id) is None:
                continue  # lost in combat earlier this turn
            if unit.movement_points <= 0 or unit.fortification in (
                    FortificationState.FORTIFYING, FortificationState.FORTIFIED):
                continue
            role = unit_role(unit.type)
            if role == UnitRole.SETTLER:
                self.handle_settler(unit)
            elif role == UnitRole.MILITARY:
                self.handle_military(unit)
            else:
                self.explore(unit)
        for city in self.state.player_cities(player.id):
            if city.current_production is None:
                self.choose_production(player, city)
        log.debug("AI %s finished turn", player.id)

    # ── Settlers ─────────────────────────────────────────────────────────

    def site_score(self, pos: Position) -> int:
        grid = self.game.grid
        score = 2 + SITE_TERRAIN_BONUS.get(grid.terrain(pos), 1)
        if grid.is_near(pos, TerrainKind.OCEAN):
            score += 2
        if grid.is_near(pos, TerrainKind.RIVER):
            score += 1
        return score

    def find_best_site(self, origin: Position) -> Position | None:
        early = self.is_early_game()
        radius = self.rules.site_radius_early if early else self.rules.site_radius_late
        best_score = self.rules.site_bar_early if early else self.rules.site_bar_late
        best = None
        for pos in self.game.grid.within(origin, radius):
            if not self.game.is_valid_city_site(pos):
                continue
            score = self.site_score(pos)
            if score > best_score:
                best_score, best = score, pos
        return best

    def handle_settler(self, unit: Unit) -> None:
        early = self.is_early_game()
        here = unit.position
        if early and self.game.is_valid_city_site(here) and self.site_score(here) > self.rules.site_bar_early:
            if self.game.found_city(unit.id):
                return
        best = self.find_best_site(here)
        if best is not None:
            if best == here:
                if self.game.found_city(unit.id):
                    return
            elif self.move_toward(unit, best):
                return
        elif early and self.game.is_valid_city_site(here):
            if self.game.found_city(unit.id):
                return
        self.explore(unit)

    # ── Military ─────────────────────────────────────────────────────────

    def nearest_enemy(self, unit: Unit) -> Unit | None:
        grid = self.game.grid
        best, best_d = None, None
        for other in self.state.units:
            if other.owner_id == unit.owner_id:
                continue
            d = grid.wrapped_distance(unit.position, other.position)
            if best_d is None or d < best_d:
                best, best_d = other, d
        return best

    def nearest_city(self, unit: Unit) -> City | None:
        grid = self.game.grid
        cities = self.state.player_cities(unit.owner_id)
        if not cities:
            return None
        return min(cities, key=lambda c: grid.wrapped_distance(unit.position, c.position))

    def handle_military(self, unit: Unit) -> None:
        grid = self.game.grid
        enemy = self.nearest_enemy(unit)
        if enemy and grid.wrapped_distance(unit.position, enemy.position) <= self.rules.engagement_radius:
            if grid.is_adjacent(unit.position, enemy.position):
                if self.game.attack_unit(unit.id, enemy.id) is not None:
                    return
            if self.move_toward(unit, enemy.position):
                return
        else:
            city = self.nearest_city(unit)
            if city and grid.wrapped_distance(unit.position, city.position) > self.rules.garrison_radius:
                if self.move_toward(unit, city.position):
                    return
        self.explore(unit)

    # ── Movement ─────────────────────────────────────────────────────────

    def valid_moves(self, unit: Unit) -> list[Position]:
        grid = self.game.grid
        return [p for p in grid.neighbors8(unit.position)
                if units.can_enter(unit, grid, p)
                and grid.wrapped_distance(unit.position, p) <= unit.movement_points]

    def move_toward(self, unit: Unit, target: Position) -> bool:
        """Take the reachable step closest to target. Ties go to the first neighbour."""
        moves = self.valid_moves(unit)
        if not moves:
            return False
        grid = self.game.grid
        best = moves[0]
        best_d = grid.wrapped_distance(best, target)
        for pos in moves[1:]:
            d = grid.wrapped_distance(pos, target)
            if d < best_d:
                best, best_d = pos, d
        return self.game.move_unit(unit.id, best)

    def explore(self, unit: Unit) -> bool:
        moves = self.valid_moves(unit)
        if not moves:
            return False
        return self.game.move_unit(unit.id, self.rng.choice(moves))

    # ── Cities ───────────────────────────────────────────────────────────

    def desired_settlers(self, city_count: int) -> int:
        turn = self.state.turn
        if turn <= self.rules.production_early_turn:
            return min(city_count + 1, 4)
        if turn <= self.rules.production_mid_turn:
            return max(2, city_count // 2)
        return max(1, city_count // 4)

    def choose_production(self, player: Player, city: City) -> None:
        cities = self.state.player_cities(player.id)
        owned = self.state.player_units(player.id)
        settlers = sum(1 for u in owned if u.type == UnitType.SETTLERS)
        settlers += sum(1 for c in cities if c.current_production
                        and c.current_production.item == UnitType.SETTLERS)
        military = sum(1 for u in owned if unit_role(u.type) == UnitRole.MILITARY)
        target = self.desired_settlers(len(cities))
        early = self.state.turn <= self.rules.production_early_turn

        if settlers < target and early:
            choices = [UnitType.SETTLERS]
        elif military < max(2, len(cities)):
            choices = [UnitType.WARRIOR]
        elif settlers < target:
            choices = [UnitType.SETTLERS]
        else:
            choices = INFRASTRUCTURE + [UnitType.WARRIOR]
        for item in choices:
            if self.game.set_city_production(city.id, item):
                log.debug("AI %s: %s builds %s", player.id, city.name, item.value)
                return

    # ── Research ─────────────────────────────────────────────────────────

    def manage_research(self, player: Player) -> None:
        if player.current_research is None:
            options = tech.available_techs(player.technologies)
            if not options:
                return
            cheapest = min(options, key=tech.tech_cost)
            self.game.set_current_research(player.id, cheapest)
        target = player.current_research
        if target is not None and player.science >= tech.tech_cost(target):
            self.game.research_technology(player.id, target)

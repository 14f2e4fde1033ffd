"""Production and research ledger: city yields, growth, shields, science and gold."""
from __future__ import annotations
import math
from dataclasses import dataclass

from .config import Rules, DEFAULT_RULES
from .types import (
    City, Player, GameState, Position, ProductionKind, ProductionOrder, UnitType,
    BuildingType, TechId, GOVERNMENTS, BUILDING_STATS, UNIT_STATS,
)
from .world import WorldGrid
from .terrain import tile_yields
from . import tech


@dataclass
class CityYield:
    food: int = 0
    production: int = 0
    trade: int = 0
    science: int = 0
    gold: int = 0
    culture: int = 0


# ── Worked tiles ─────────────────────────────────────────────────────────────

def city_offsets(radius: int) -> list[tuple[int, int]]:
    """Workable offsets around a city: the square minus the centre and far corners."""
    out = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if (dx, dy) == (0, 0) or (abs(dx) == radius and abs(dy) == radius and radius > 1):
                continue
            out.append((dx, dy))
    return out


def _tile_value(food: int, prod: int, trade: int) -> int:
    return 3 * food + 2 * prod + trade


def _claimed(state: GameState, grid: WorldGrid, exclude: City) -> set[Position]:
    taken = {c.position for c in state.cities}
    for other in state.cities:
        if other.id == exclude.id:
            continue
        for dx, dy in other.worked_tiles:
            taken.add(grid.normalize(other.position.offset(dx, dy)))
    return taken


def assign_worked_tiles(city: City, state: GameState, grid: WorldGrid,
                        rules: Rules = DEFAULT_RULES) -> None:
    """Add or drop worked tiles so the city works exactly min(population, free tiles)."""
    while len(city.worked_tiles) > city.population:
        worst = min(city.worked_tiles, key=lambda o: _tile_value(*_offset_yields(city, grid, o)))
        city.worked_tiles.discard(worst)
    if len(city.worked_tiles) >= city.population:
        return
    taken = _claimed(state, grid, city)
    candidates = []
    for off in city_offsets(rules.city_radius):
        pos = city.position.offset(*off)
        if off in city.worked_tiles or not grid.in_bounds(pos) or grid.normalize(pos) in taken:
            continue
        candidates.append((_tile_value(*_offset_yields(city, grid, off)), off))
    # stable sort keeps enumeration order for ties
    candidates.sort(key=lambda c: -c[0])
    for _, off in candidates[:city.population - len(city.worked_tiles)]:
        city.worked_tiles.add(off)


def release_tile(state: GameState, grid: WorldGrid, pos: Position,
                 rules: Rules = DEFAULT_RULES) -> list[City]:
    """Stop other cities working the tile at pos and refill their worked tiles elsewhere."""
    pos = grid.normalize(pos)
    affected = []
    for city in state.cities:
        if city.position == pos:
            continue
        hit = {off for off in city.worked_tiles
               if grid.normalize(city.position.offset(*off)) == pos}
        if hit:
            city.worked_tiles -= hit
            affected.append(city)
    for city in affected:
        assign_worked_tiles(city, state, grid, rules)
    return affected


def _offset_yields(city: City, grid: WorldGrid, off: tuple[int, int]) -> tuple[int, int, int]:
    return tile_yields(grid.tile(city.position.offset(*off)))


# ── Yields ───────────────────────────────────────────────────────────────────

def _government_adjust(value: int, player: Player, is_trade: bool) -> int:
    gov = GOVERNMENTS[player.government]
    if gov.tile_penalty and value >= 3:
        value -= 1
    if is_trade and gov.trade_bonus and value > 0:
        value += gov.trade_bonus
    return value


def production_capacity(city: City, rules: Rules = DEFAULT_RULES) -> int:
    return rules.base_production + sum(BUILDING_STATS[b].production for b in city.buildings)


def city_yields(city: City, player: Player, grid: WorldGrid, rules: Rules = DEFAULT_RULES) -> CityYield:
    tiles = [tile_yields(grid.tile(city.position), city_center=True)]
    tiles += [_offset_yields(city, grid, off) for off in sorted(city.worked_tiles)]
    y = CityYield()
    for food, _, trade in tiles:
        y.food += _government_adjust(food, player, is_trade=False)
        y.trade += _government_adjust(trade, player, is_trade=True)
    stats = [BUILDING_STATS[b] for b in city.buildings]
    y.food += sum(s.food for s in stats)
    y.production = production_capacity(city, rules)

    y.science = math.ceil(y.trade * rules.science_share / 100)
    y.gold = y.trade - y.science
    y.science += y.science * sum(s.science_pct for s in stats) // 100
    y.gold += y.gold * sum(s.gold_pct for s in stats) // 100
    y.gold += sum(s.gold for s in stats)
    y.culture = 1 + sum(s.culture for s in stats)
    return y


# ── Growth ───────────────────────────────────────────────────────────────────

def grow_city(city: City, player: Player, state: GameState, grid: WorldGrid,
              rules: Rules = DEFAULT_RULES) -> int:
    """Apply one turn of food. Returns the population change (-1, 0 or 1)."""
    surplus = city_yields(city, player, grid, rules).food - city.population * rules.food_per_citizen
    box = rules.food_box(city.population)
    if surplus < 0 and -surplus > city.food:
        city.food = 0
        if city.population > 1:
            city.population -= 1
            assign_worked_tiles(city, state, grid, rules)
            return -1
        return 0
    city.food += surplus
    if city.food < box:
        return 0
    if city.population >= rules.aqueduct_cap and not city.has_building(BuildingType.AQUEDUCT):
        city.food = box
        return 0
    city.population += 1
    city.food = 0
    assign_worked_tiles(city, state, grid, rules)
    return 1


# ── Production ───────────────────────────────────────────────────────────────

def production_kind(item: UnitType | BuildingType) -> ProductionKind:
    if isinstance(item, UnitType):
        return ProductionKind.UNIT
    return ProductionKind.WONDER if BUILDING_STATS[item].wonder else ProductionKind.BUILDING


def parse_item(item: str | UnitType | BuildingType) -> UnitType | BuildingType:
    """Resolve a production item name. Raises ValueError for unknown names."""
    if isinstance(item, (UnitType, BuildingType)):
        return item
    try:
        return UnitType(item)
    except ValueError:
        return BuildingType(item)


def turns_remaining(city: City, cost: int, rules: Rules = DEFAULT_RULES) -> int:
    left = max(0, cost - city.production_points)
    return math.ceil(left / production_capacity(city, rules))


def make_order(city: City, item: UnitType | BuildingType, rules: Rules = DEFAULT_RULES) -> ProductionOrder:
    kind = production_kind(item)
    cost = UNIT_STATS[item].cost if kind == ProductionKind.UNIT else BUILDING_STATS[item].cost
    return ProductionOrder(kind=kind, item=item, turns_remaining=turns_remaining(city, cost, rules))


def can_build(city: City, player: Player, state: GameState, item: UnitType | BuildingType) -> bool:
    if isinstance(item, UnitType):
        req = UNIT_STATS[item].tech
        return req is None or req in player.technologies
    stats = BUILDING_STATS[item]
    if stats.tech is not None and stats.tech not in player.technologies:
        return False
    if city.has_building(item):
        return False
    return not (stats.wonder and item in state.wonders)


def available_production(city: City, player: Player, state: GameState) -> list[UnitType | BuildingType]:
    items: list[UnitType | BuildingType] = [*UnitType, *BuildingType]
    return [i for i in items if can_build(city, player, state, i)]


def advance_production(city: City, rules: Rules = DEFAULT_RULES) -> UnitType | BuildingType | None:
    """Add this turn's shields. Returns the completed item, keeping any surplus."""
    order = city.current_production
    if order is None:
        return None
    city.production_points += production_capacity(city, rules)
    if city.production_points < order.cost:
        order.turns_remaining = turns_remaining(city, order.cost, rules)
        return None
    city.production_points -= order.cost
    city.current_production = None
    return order.item


# ── Player income ────────────────────────────────────────────────────────────

def maintenance(player: Player, state: GameState) -> int:
    return sum(BUILDING_STATS[b].maintenance
               for c in state.player_cities(player.id) for b in c.buildings)


def collect_income(player: Player, state: GameState, grid: WorldGrid,
                   rules: Rules = DEFAULT_RULES) -> CityYield:
    """Accrue science, gold and culture from all of a player's cities."""
    gov = GOVERNMENTS[player.government]
    total = CityYield()
    for city in state.player_cities(player.id):
        y = city_yields(city, player, grid, rules)
        city.science, city.culture = y.science, city.culture + y.culture
        total.food += y.food; total.production += y.production; total.trade += y.trade
        total.science += y.science; total.gold += y.gold; total.culture += y.culture
    if not gov.research:
        total.science = 0
    if not gov.tax_collection:
        total.gold = 0
    upkeep = maintenance(player, state) if gov.maintenance else 0
    player.science += total.science
    player.gold = max(0, player.gold + total.gold - upkeep)
    player.culture += total.culture
    if player.current_research is not None:
        player.current_research_progress = min(player.science, tech.tech_cost(player.current_research))
    return total


def research(player: Player, tech_id: TechId) -> bool:
    if tech_id in player.technologies or not tech.can_research(player.technologies, tech_id):
        return False
    cost = tech.tech_cost(tech_id)
    if player.science < cost:
        return False
    player.science -= cost
    player.technologies.add(tech_id)
    if player.current_research == tech_id:
        player.current_research = None
        player.current_research_progress = None
    return True

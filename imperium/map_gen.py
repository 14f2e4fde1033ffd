"""Scenario maps and start positions for Imperium."""
from __future__ import annotations
import random

from .config import Rules, DEFAULT_RULES
from .types import Position, TerrainKind
from .terrain import describe
from .world import WorldGrid

T = TerrainKind

# Bands for the "banded" scenario, as fractions of the distance from the equator
_BANDS = [
    (0.15, [T.GRASSLAND, T.RIVER, T.JUNGLE, T.GRASSLAND, T.PLAINS]),
    (0.40, [T.GRASSLAND, T.PLAINS, T.FOREST, T.HILLS, T.GRASSLAND, T.RIVER, T.SWAMP]),
    (0.65, [T.PLAINS, T.DESERT, T.HILLS, T.MOUNTAINS, T.FOREST, T.GRASSLAND]),
    (0.90, [T.TUNDRA, T.FOREST, T.TUNDRA, T.HILLS]),
    (1.01, [T.ARCTIC]),
]


def grassland(rules: Rules = DEFAULT_RULES, rng: random.Random | None = None) -> WorldGrid:
    return WorldGrid.filled(rules.map_width, rules.map_height, T.GRASSLAND)


def banded(rules: Rules = DEFAULT_RULES, rng: random.Random | None = None) -> WorldGrid:
    """Latitude bands with an ocean channel every quarter of the world and seeded resources."""
    rng = rng or random.Random(0)
    grid = WorldGrid.filled(rules.map_width, rules.map_height, T.GRASSLAND)
    mid = (rules.map_height - 1) / 2
    channel = max(rules.map_width // 4, 1)
    for pos in grid.all_positions():
        tile = grid.tile(pos)
        if pos.x % channel == channel - 1:
            tile.terrain = T.OCEAN
        else:
            lat = abs(pos.y - mid) / max(mid, 1)
            kinds = next(k for limit, k in _BANDS if lat < limit)
            tile.terrain = rng.choice(kinds)
        for res, prob in describe(tile.terrain).resource_probabilities.items():
            if rng.random() < prob:
                tile.resources.add(res)
                break
    return grid


SCENARIOS = {
    "grassland": grassland,
    "banded": banded,
}


def build_scenario(name: str, rules: Rules = DEFAULT_RULES, rng: random.Random | None = None) -> WorldGrid:
    try:
        builder = SCENARIOS[name]
    except KeyError:
        raise KeyError(f"Unknown scenario {name!r}; choose from {sorted(SCENARIOS)}") from None
    return builder(rules, rng)


def _is_start(grid: WorldGrid, pos: Position) -> bool:
    info = describe(grid.terrain(pos))
    return info.passable and info.can_found_city


def find_start_position(grid: WorldGrid, x: int, y: int, taken: set[Position] = frozenset()) -> Position:
    """Nearest tile to (x, y) where a settler can found a city, searched in growing rings."""
    origin = grid.normalize(Position(x, y))
    if _is_start(grid, origin) and origin not in taken:
        return origin
    for radius in range(1, max(grid.width, grid.height)):
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                if max(abs(dx), abs(dy)) != radius:
                    continue
                pos = origin.offset(dx, dy)
                if not grid.in_bounds(pos):
                    continue
                pos = grid.normalize(pos)
                if _is_start(grid, pos) and pos not in taken:
                    return pos
    for pos in grid.all_positions():
        if _is_start(grid, pos):
            return pos
    raise ValueError("Map has no tile where a city can be founded")


def start_positions(grid: WorldGrid, count: int) -> list[Position]:
    spacing = grid.width // count
    out: list[Position] = []
    for i in range(count):
        x = min(spacing * i + 5, grid.width - 1)
        out.append(find_start_position(grid, x, grid.height // 2, set(out)))
    return out

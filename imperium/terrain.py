"""Terrain lookup table: movement, yields, founding rules and resource odds."""
from __future__ import annotations
from dataclasses import dataclass, field

from .types import TerrainKind, ResourceKind, ImprovementKind, Tile

IMPASSABLE_COST = 999


@dataclass(frozen=True)
class TerrainInfo:
    kind: TerrainKind
    movement_cost: int
    passable: bool
    food: int
    production: int
    trade: int
    can_found_city: bool
    defense_bonus: float = 1.0
    resource_probabilities: dict[ResourceKind, float] = field(default_factory=dict)


_R = ResourceKind

TERRAIN_TABLE: dict[TerrainKind, TerrainInfo] = {t.kind: t for t in (
    #           kind                  move  pass  F  P  T  city   def
    TerrainInfo(TerrainKind.GRASSLAND, 1, True, 2, 0, 0, True, 1.0, {_R.WHEAT: 0.075, _R.HORSES: 0.025}),
    TerrainInfo(TerrainKind.PLAINS,    1, True, 1, 1, 0, True, 1.0, {_R.HORSES: 0.08, _R.WHEAT: 0.05}),
    TerrainInfo(TerrainKind.DESERT,    1, True, 0, 1, 0, True, 1.0, {_R.GOLD: 0.05, _R.OASIS: 0.05}),
    TerrainInfo(TerrainKind.FOREST,    2, True, 1, 2, 0, True, 1.5, {_R.GAME: 0.05}),
    TerrainInfo(TerrainKind.HILLS,     1, True, 1, 1, 0, True, 1.5,
                {_R.IRON: 0.1, _R.HORSES: 0.025, _R.COAL: 0.05}),
    TerrainInfo(TerrainKind.MOUNTAINS, 3, True, 0, 3, 0, False, 2.0,
                {_R.GOLD: 0.25, _R.IRON: 0.15, _R.GEM: 0.05}),
    TerrainInfo(TerrainKind.OCEAN, IMPASSABLE_COST, False, 1, 0, 2, False, 1.0, {_R.FISH: 0.2}),
    TerrainInfo(TerrainKind.RIVER,     1, True, 2, 0, 1, True, 1.5, {_R.FISH: 0.5}),
    TerrainInfo(TerrainKind.JUNGLE,    1, True, 1, 1, 0, True, 1.5, {_R.GOLD: 0.05, _R.GEM: 0.05}),
    TerrainInfo(TerrainKind.SWAMP,     2, True, 1, 0, 0, True, 1.5, {_R.OIL: 0.05}),
    TerrainInfo(TerrainKind.ARCTIC,    2, True, 1, 0, 0, True, 1.0, {_R.SEAL: 0.1}),
    TerrainInfo(TerrainKind.TUNDRA,    1, True, 1, 0, 0, True, 1.0, {_R.GAME: 0.1}),
)}

# (food, production, trade) added by a special resource on the tile
RESOURCE_BONUS: dict[ResourceKind, tuple[int, int, int]] = {
    _R.WHEAT: (2, 0, 0),
    _R.FISH: (2, 0, 0),
    _R.SEAL: (2, 0, 0),
    _R.OASIS: (3, 0, 0),
    _R.GAME: (1, 0, 0),
    _R.HORSES: (0, 2, 0),
    _R.COAL: (0, 2, 0),
    _R.IRON: (0, 2, 0),
    _R.OIL: (0, 3, 0),
    _R.GOLD: (0, 0, 6),
    _R.GEM: (0, 0, 4),
}

ROAD_TRADE_TERRAIN = {TerrainKind.GRASSLAND, TerrainKind.PLAINS, TerrainKind.DESERT}


def describe(kind: TerrainKind | str) -> TerrainInfo:
    """Look up a terrain kind. Unknown kinds are a data error and raise."""
    try:
        return TERRAIN_TABLE[TerrainKind(kind)]
    except (ValueError, KeyError):
        raise KeyError(f"Unknown terrain kind: {kind!r}") from None


def tile_yields(tile: Tile, city_center: bool = False) -> tuple[int, int, int]:
    """Raw (food, production, trade) of a tile before government rules."""
    info = describe(tile.terrain)
    food, prod, trade = info.food, info.production, info.trade
    for res in tile.resources:
        f, p, t = RESOURCE_BONUS[res]
        food += f; prod += p; trade += t
    roaded = city_center or tile.has(ImprovementKind.ROAD)
    if roaded and tile.terrain in ROAD_TRADE_TERRAIN:
        trade += 1
    if tile.has(ImprovementKind.IRRIGATION) or tile.has(ImprovementKind.FARM):
        food += 1
    if tile.has(ImprovementKind.MINE):
        prod += 1
    return food, prod, trade

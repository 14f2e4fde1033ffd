import random

import pytest

from imperium.config import Rules
from imperium.map_gen import build_scenario, find_start_position, start_positions
from imperium.types import Position, TerrainKind
from imperium.world import WorldGrid


def test_grassland_scenario():
    grid = build_scenario("grassland", Rules())
    assert (grid.width, grid.height) == (80, 50)
    assert all(grid.terrain(p) == TerrainKind.GRASSLAND for p in grid.all_positions())


def test_unknown_scenario():
    with pytest.raises(KeyError):
        build_scenario("atlantis")


def test_banded_scenario_is_seeded():
    a = build_scenario("banded", Rules(), random.Random(4))
    b = build_scenario("banded", Rules(), random.Random(4))
    assert [[t.terrain for t in row] for row in a.tiles] == [[t.terrain for t in row] for row in b.tiles]
    assert all(a.terrain(Position(19, y)) == TerrainKind.OCEAN for y in range(a.height))
    assert a.terrain(Position(10, 0)) == TerrainKind.ARCTIC


def test_start_positions_spread_along_equator():
    grid = WorldGrid.filled(80, 50)
    assert start_positions(grid, 2) == [Position(5, 25), Position(45, 25)]
    assert start_positions(grid, 3) == [Position(5, 25), Position(31, 25), Position(57, 25)]


def test_start_position_avoids_water():
    grid = WorldGrid.filled(80, 50)
    grid.tile(Position(5, 25)).terrain = TerrainKind.OCEAN
    assert find_start_position(grid, 5, 25) == Position(4, 24)


def test_map_without_land_is_rejected():
    with pytest.raises(ValueError):
        find_start_position(WorldGrid.filled(4, 4, TerrainKind.OCEAN), 1, 1)

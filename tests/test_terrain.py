import pytest

from imperium.terrain import describe, tile_yields, TERRAIN_TABLE
from imperium.types import TerrainKind, ResourceKind, ImprovementKind, Tile, Position


def test_every_terrain_kind_is_registered():
    assert set(TERRAIN_TABLE) == set(TerrainKind)


def test_describe_grassland():
    info = describe(TerrainKind.GRASSLAND)
    assert (info.movement_cost, info.passable, info.food, info.production, info.trade) == (1, True, 2, 0, 0)
    assert info.can_found_city
    assert info.resource_probabilities[ResourceKind.WHEAT] == 0.075


def test_describe_accepts_names():
    assert describe("mountains").production == 3
    assert not describe("mountains").can_found_city


def test_ocean_is_impassable():
    info = describe(TerrainKind.OCEAN)
    assert not info.passable
    assert not info.can_found_city
    assert info.trade == 2


def test_unknown_terrain_is_a_hard_error():
    with pytest.raises(KeyError):
        describe("lava")


def test_city_centre_counts_as_roaded():
    tile = Tile(Position(0, 0), TerrainKind.GRASSLAND)
    assert tile_yields(tile) == (2, 0, 0)
    assert tile_yields(tile, city_center=True) == (2, 0, 1)


def test_resources_and_improvements_add_yield():
    tile = Tile(Position(0, 0), TerrainKind.PLAINS, resources={ResourceKind.WHEAT},
                improvements=[ImprovementKind.ROAD, ImprovementKind.MINE])
    assert tile_yields(tile) == (3, 2, 1)


def test_road_gives_no_trade_in_forest():
    tile = Tile(Position(0, 0), TerrainKind.FOREST, improvements=[ImprovementKind.ROAD])
    assert tile_yields(tile) == (1, 2, 0)

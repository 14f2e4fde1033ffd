from imperium.events import GovernmentChanged
from imperium.game import Game
from imperium.types import (
    BuildingType, FortificationState, GovernmentType, ImprovementKind, TechId, UnitType,
)


def end_round(game, times=1):
    for _ in range(times * len(game.state.players)):
        assert game.end_turn()


def test_round_robin_and_turn_counter():
    game = Game.create(["A", "B", "C"], humans=(0, 1, 2), seed=1)
    seen = []
    for _ in range(6):
        seen.append((game.state.turn, game.state.current_player_id))
        game.end_turn()
    assert seen == [
        (1, "player-0"), (1, "player-1"), (1, "player-2"),
        (2, "player-0"), (2, "player-1"), (2, "player-2"),
    ]
    assert game.state.turn == 3


def test_movement_restored_at_own_turn_start(game, p0_warrior):
    assert game.move_unit(p0_warrior.id, (6, 25))
    assert p0_warrior.movement_points == 0
    game.end_turn()
    assert p0_warrior.movement_points == 0
    game.end_turn()
    assert p0_warrior.movement_points == 1
    assert p0_warrior.id in game.queue


def test_fortifying_becomes_fortified_on_next_own_turn(game, p0_warrior):
    p0_warrior.health = 50
    assert game.fortify_unit(p0_warrior.id)
    game.end_turn()
    assert p0_warrior.fortification == FortificationState.FORTIFYING
    game.end_turn()
    assert p0_warrior.fortification == FortificationState.FORTIFIED
    assert p0_warrior.movement_points == 0
    assert p0_warrior.id not in game.queue
    end_round(game)
    assert p0_warrior.health == 60


def test_city_production_spawns_units(game, p0_settler):
    assert game.found_city(p0_settler.id)
    city = game.state.player_cities("player-0")[0]
    assert game.set_city_production(city.id, UnitType.WARRIOR)
    end_round(game)
    assert len(game.state.player_units("player-0")) == 1
    end_round(game)
    warriors = game.state.player_units("player-0")
    assert len(warriors) == 2
    assert warriors[-1].position == city.position
    assert not warriors[-1].is_veteran
    assert city.current_production is None


def test_barracks_make_veterans(game, p0_settler):
    game.found_city(p0_settler.id)
    city = game.state.player_cities("player-0")[0]
    city.buildings.append(BuildingType.BARRACKS)
    game.set_city_production(city.id, UnitType.WARRIOR)
    end_round(game)
    assert game.state.player_units("player-0")[-1].is_veteran


def test_wonder_is_recorded(game, p0_settler):
    game.found_city(p0_settler.id)
    city = game.state.player_cities("player-0")[0]
    game.state.player("player-0").technologies.add(TechId.BRONZE_WORKING)
    assert game.set_city_production(city.id, BuildingType.COLOSSUS)
    city.production_points = 19
    end_round(game)
    assert BuildingType.COLOSSUS in city.buildings
    assert game.state.wonders == {BuildingType.COLOSSUS: city.id}


def test_road_building(game, p0_settler):
    assert game.build_road(p0_settler.id)
    end_round(game)
    assert p0_settler.fortification == FortificationState.BUILDING_ROAD
    end_round(game)
    assert game.grid.tile(p0_settler.position).has(ImprovementKind.ROAD)
    assert p0_settler.fortification == FortificationState.ACTIVE
    assert p0_settler.movement_points == 1


def test_revolution_settles_on_chosen_government(game):
    changes = []
    game.subscribe(GovernmentChanged, changes.append)
    player = game.state.player("player-0")
    assert game.start_revolution(player.id)
    assert player.government == GovernmentType.ANARCHY
    assert 2 <= player.revolution_turns_remaining <= 5
    assert not game.start_revolution(player.id)

    assert not game.change_government(player.id, GovernmentType.MONARCHY)
    player.technologies.add(TechId.MONARCHY)
    assert game.change_government(player.id, GovernmentType.MONARCHY)
    assert player.government == GovernmentType.ANARCHY

    for _ in range(12):
        if not player.in_anarchy:
            break
        game.end_turn()
    assert player.government == GovernmentType.MONARCHY
    assert player.revolution_turns_remaining is None
    assert [c.government for c in changes] == [GovernmentType.MONARCHY]


def test_revolution_defaults_to_despotism(game):
    player = game.state.player("player-1")
    game.start_revolution(player.id)
    for _ in range(12):
        game.end_turn()
    assert player.government == GovernmentType.DESPOTISM


def test_anarchy_suspends_research(game, p0_settler):
    game.found_city(p0_settler.id)
    player = game.state.player("player-0")
    game.start_revolution(player.id)
    science = player.science
    end_round(game)
    assert player.in_anarchy
    assert player.science == science


def test_science_accrues_under_despotism(game, p0_settler):
    game.found_city(p0_settler.id)
    player = game.state.player("player-0")
    end_round(game)
    assert player.science == 21

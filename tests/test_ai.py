from imperium.types import BuildingType, Position, TechId, TerrainKind, UnitType


def p1(game):
    return game.state.player("player-1")


def test_early_settler_founds_where_it_stands(game):
    game.state.turn = 3
    game.ai.play_turn(p1(game))
    city = game.state.city_at(Position(45, 25))
    assert city is not None and city.owner_id == "player-1"
    assert game.state.unit("settlers-player-1") is None


def test_site_score(game):
    grid = game.grid
    assert game.ai.site_score(Position(20, 10)) == 5
    grid.tile(Position(21, 10)).terrain = TerrainKind.OCEAN
    assert game.ai.site_score(Position(20, 10)) == 7
    grid.tile(Position(30, 10)).terrain = TerrainKind.RIVER
    assert game.ai.site_score(Position(30, 10)) == 7
    assert game.ai.site_score(Position(31, 10)) == 6


def test_late_site_search_keeps_first_best(game):
    game.state.turn = 20
    settler = game.state.unit("settlers-player-1")
    assert game.ai.find_best_site(settler.position) == Position(40, 20)
    game.ai.handle_settler(settler)
    assert settler.position == Position(45, 24)


def test_move_toward_breaks_ties_by_neighbour_order(game):
    unit = game.create_unit(UnitType.WARRIOR, (10, 10), "player-1")
    assert game.ai.valid_moves(unit) == [
        Position(10, 9), Position(9, 10), Position(11, 10), Position(10, 11)]
    assert game.ai.move_toward(unit, Position(12, 8))
    assert unit.position == Position(10, 9)


def test_military_closes_in_on_enemies(game):
    hunter = game.create_unit(UnitType.WARRIOR, (20, 25), "player-1")
    game.create_unit(UnitType.WARRIOR, (22, 25), "player-0")
    game.ai.handle_military(hunter)
    assert hunter.position == Position(21, 25)


def test_military_attacks_adjacent_enemy(game, fixed_rng):
    hunter = game.create_unit(UnitType.WARRIOR, (20, 25), "player-1")
    prey = game.create_unit(UnitType.WARRIOR, (21, 25), "player-0")
    game.rng = fixed_rng(0.0)
    game.ai.handle_military(hunter)
    assert game.state.unit(prey.id) is None
    assert hunter.position == Position(20, 25)
    assert hunter.is_veteran


def test_military_returns_to_nearest_city(game):
    game.found_city("settlers-player-1")
    guard = game.create_unit(UnitType.WARRIOR, (40, 25), "player-1")
    game.ai.handle_military(guard)
    assert guard.position == Position(41, 25)


def test_desired_settlers(game):
    ai = game.ai
    game.state.turn = 1
    assert ai.desired_settlers(1) == 2
    assert ai.desired_settlers(5) == 4
    game.state.turn = 30
    assert ai.desired_settlers(6) == 3
    game.state.turn = 60
    assert ai.desired_settlers(2) == 1
    assert ai.desired_settlers(8) == 2


def test_production_priorities(game):
    game.found_city("settlers-player-1")
    player = p1(game)
    city = game.state.player_cities(player.id)[0]

    game.ai.choose_production(player, city)
    assert city.current_production.item == UnitType.SETTLERS

    city.current_production = None
    game.state.turn = 30
    game.ai.choose_production(player, city)
    assert city.current_production.item == UnitType.WARRIOR

    city.current_production = None
    game.state.turn = 60
    game.create_unit(UnitType.WARRIOR, (46, 25), player.id)
    game.create_unit(UnitType.SETTLERS, (47, 25), player.id)
    game.ai.choose_production(player, city)
    assert city.current_production.item == BuildingType.BARRACKS


def test_research_cheapest_and_complete_when_affordable(game):
    player = p1(game)
    game.ai.manage_research(player)
    assert TechId.POTTERY in player.technologies
    assert player.science == 14
    assert player.current_research is None

    player.science = 0
    game.ai.manage_research(player)
    assert player.current_research == TechId.WARRIOR_CODE
    assert TechId.WARRIOR_CODE not in player.technologies

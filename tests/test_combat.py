import random

import pytest

from imperium.combat import TerrainContext, attack_strength, defense_strength, resolve, win_probability
from imperium.config import Rules
from imperium.types import GameState, Position, UnitType, TerrainKind, FortificationState
from imperium.units import new_unit


def make(utype, owner="a", **kw):
    unit = new_unit(GameState(), utype, Position(0, 0), owner)
    for k, v in kw.items():
        setattr(unit, k, v)
    return unit


GRASS = TerrainContext(TerrainKind.GRASSLAND)


def test_attacker_wins_every_round(fixed_rng):
    att, dfn = make(UnitType.WARRIOR), make(UnitType.WARRIOR, owner="b")
    result = resolve(att, dfn, GRASS, fixed_rng(0.0))
    assert result.attacker_survived and not result.defender_survived
    assert result.attacker_health_delta == 0
    assert result.defender_health_delta == -100
    assert result.rounds == 10


def test_defender_wins_every_round(fixed_rng):
    att, dfn = make(UnitType.WARRIOR), make(UnitType.WARRIOR, owner="b")
    result = resolve(att, dfn, GRASS, fixed_rng(0.99))
    assert not result.attacker_survived and result.defender_survived
    assert result.attacker_health_delta == -100
    assert result.defender_health_delta == 0


def test_damaged_units_fall_sooner(fixed_rng):
    att, dfn = make(UnitType.WARRIOR), make(UnitType.WARRIOR, owner="b", health=30)
    result = resolve(att, dfn, GRASS, fixed_rng(0.0))
    assert result.rounds == 3
    assert result.defender_health_delta == -30


@pytest.mark.parametrize("seed", range(40))
def test_exactly_one_unit_survives(seed):
    att, dfn = make(UnitType.LEGION), make(UnitType.PHALANX, owner="b")
    result = resolve(att, dfn, TerrainContext(TerrainKind.HILLS), random.Random(seed))
    assert result.attacker_survived != result.defender_survived
    assert (att.health + result.attacker_health_delta > 0) == result.attacker_survived
    assert (dfn.health + result.defender_health_delta > 0) == result.defender_survived


def test_resolve_does_not_mutate_units(rng):
    att, dfn = make(UnitType.WARRIOR), make(UnitType.WARRIOR, owner="b")
    resolve(att, dfn, GRASS, rng)
    assert att.health == dfn.health == 100


def test_same_seed_same_outcome():
    att, dfn = make(UnitType.ARCHER), make(UnitType.PHALANX, owner="b")
    a = resolve(att, dfn, GRASS, random.Random(11))
    b = resolve(att, dfn, GRASS, random.Random(11))
    assert a == b


def test_zero_attack_never_wins_a_round():
    settler, dfn = make(UnitType.SETTLERS), make(UnitType.WARRIOR, owner="b")
    result = resolve(settler, dfn, GRASS, random.Random(0))
    assert not result.attacker_survived


def test_defense_modifiers_stack():
    phalanx = make(UnitType.PHALANX, fortification=FortificationState.FORTIFIED)
    assert defense_strength(phalanx, TerrainContext(TerrainKind.HILLS)) == pytest.approx(4.5)
    assert defense_strength(phalanx, TerrainContext(TerrainKind.HILLS, fortress=True)) == pytest.approx(9.0)
    walled = TerrainContext(TerrainKind.GRASSLAND, city_defense=3.0)
    assert defense_strength(phalanx, walled) == pytest.approx(9.0)


def test_fortifying_is_not_yet_fortified():
    phalanx = make(UnitType.PHALANX, fortification=FortificationState.FORTIFYING)
    assert defense_strength(phalanx, GRASS) == pytest.approx(2.0)


def test_veteran_bonus_uses_rules():
    vet = make(UnitType.LEGION, is_veteran=True)
    assert attack_strength(vet) == pytest.approx(4.5)
    assert attack_strength(vet, Rules(veteran_multiplier=2.0)) == pytest.approx(6.0)


def test_win_probability():
    assert win_probability(3, 1) == pytest.approx(0.75)
    assert win_probability(0, 1) == 0.0

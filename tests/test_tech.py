import pytest

from imperium import tech
from imperium.types import TechId, GovernmentType


def test_tech_table_is_a_valid_dag():
    tech.validate_tree(tech.TECH_TREE)


def test_validate_tree_rejects_cycles():
    tree = {TechId.POTTERY: (6, (TechId.ALPHABET,)), TechId.ALPHABET: (6, (TechId.POTTERY,))}
    with pytest.raises(ValueError):
        tech.validate_tree(tree)


def test_validate_tree_rejects_missing_prerequisites():
    with pytest.raises(ValueError):
        tech.validate_tree({TechId.WRITING: (12, (TechId.ALPHABET,))})


def test_every_tech_has_an_entry():
    assert set(tech.TECH_TREE) == set(TechId)


def test_can_research_checks_prerequisites():
    assert not tech.can_research(set(), TechId.WRITING)
    assert tech.can_research({TechId.ALPHABET}, TechId.WRITING)
    assert not tech.can_research({TechId.ALPHABET, TechId.WRITING}, TechId.WRITING)


def test_available_techs_at_start_are_the_roots_in_table_order():
    assert tech.available_techs(set()) == [
        TechId.POTTERY, TechId.WARRIOR_CODE, TechId.ALPHABET, TechId.CEREMONIAL_BURIAL,
        TechId.BRONZE_WORKING, TechId.MASONRY, TechId.HORSEBACK_RIDING, TechId.THE_WHEEL,
    ]


def test_tech_cost_lookup():
    assert tech.tech_cost(TechId.DEMOCRACY) == 30
    assert tech.tech_cost("pottery") == 6
    with pytest.raises(ValueError):
        tech.tech_cost("time_travel")


def test_available_governments_follow_technology():
    assert tech.available_governments(set()) == [GovernmentType.DESPOTISM]
    govs = tech.available_governments({TechId.MONARCHY, TechId.THE_REPUBLIC})
    assert govs == [GovernmentType.DESPOTISM, GovernmentType.MONARCHY, GovernmentType.REPUBLIC]
    assert GovernmentType.ANARCHY not in tech.available_governments(set(TechId))

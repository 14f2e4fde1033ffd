import random

from imperium.civs import (
    CIVS, NAME_PREFIXES, NAME_SUFFIXES, civ_for_index, get_civ_info, next_city_name,
)
from imperium.types import Player


def make_player(civ="romans"):
    return Player(id="player-0", name="P", is_human=False, color="#000", civilization=civ)


def test_every_civ_has_sixteen_city_names():
    assert len(CIVS) == 14
    assert all(len(c["cities"]) == 16 for c in CIVS.values())


def test_civ_assignment_wraps():
    assert civ_for_index(0) == "romans"
    assert civ_for_index(14) == "romans"
    assert civ_for_index(1) == "american"


def test_unknown_civ_falls_back():
    assert get_civ_info("atlanteans")["name"] == "Roman Empire"


def test_names_come_from_civ_list_in_order():
    player = make_player()
    assert next_city_name(player, random.Random(0)) == "Rome"
    player.used_city_names.add("Rome")
    assert next_city_name(player, random.Random(0)) == "Caesarea"


def test_generated_names_once_the_list_is_exhausted():
    player = make_player()
    player.used_city_names.update(CIVS["romans"]["cities"])
    name = next_city_name(player, random.Random(3))
    assert name not in player.used_city_names
    prefix, suffix = name.split(" ")
    assert prefix in NAME_PREFIXES
    assert suffix in NAME_SUFFIXES


def test_numeric_disambiguator_as_last_resort():
    player = make_player()
    player.used_city_names.update(CIVS["romans"]["cities"])
    player.used_city_names.update(f"{p} {s}" for p in NAME_PREFIXES for s in NAME_SUFFIXES)
    name = next_city_name(player, random.Random(3), attempts=50)
    assert name.endswith(f" {len(player.used_city_names) + 1}")

import json

import pytest
from pydantic import ValidationError

from imperium.config import Rules, load_rules, DEFAULT_RULES


def test_food_box(rules):
    assert [rules.food_box(n) for n in (1, 2, 3, 4, 5)] == [20, 30, 40, 50, 60]


def test_city_spacing_tightens_then_loosens():
    rules = Rules()
    assert rules.city_spacing(10) == 2
    assert rules.city_spacing(11) == 3


def test_rules_are_validated():
    with pytest.raises(ValidationError):
        Rules(science_share=150)
    with pytest.raises(ValidationError):
        Rules(combat_round_damage=0)
    with pytest.raises(ValidationError):
        Rules(base_production=0)


def test_rules_file_without_production_is_rejected(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"base_production": 0}))
    with pytest.raises(ValidationError):
        load_rules(path)


def test_load_rules_defaults(monkeypatch):
    monkeypatch.delenv("IMPERIUM_RULES", raising=False)
    assert load_rules() is DEFAULT_RULES


def test_load_rules_from_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"starting_gold": 99, "revolution_max_turns": 3}))
    rules = load_rules(path)
    assert rules.starting_gold == 99
    assert rules.revolution_max_turns == 3
    assert rules.starting_science == 20


def test_load_rules_from_env(tmp_path, monkeypatch):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"city_spacing_late": 4}))
    monkeypatch.setenv("IMPERIUM_RULES", str(path))
    assert load_rules().city_spacing(30) == 4

"""Tunable rule constants for Imperium."""
from __future__ import annotations
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

RULES_ENV = "IMPERIUM_RULES"


class Rules(BaseModel):
    model_config = ConfigDict(frozen=True)

    # World and setup
    map_width: int = Field(80, ge=8)
    map_height: int = Field(50, ge=4)
    starting_gold: int = 50
    starting_science: int = 20

    # Game stages
    early_game_turn: int = 10
    production_early_turn: int = 15
    production_mid_turn: int = 50

    # City placement
    city_spacing_early: int = 2
    city_spacing_late: int = 3
    site_radius_early: int = 2
    site_radius_late: int = 5
    site_bar_early: int = 1
    site_bar_late: int = 3

    # AI military
    engagement_radius: int = 3
    garrison_radius: int = 2

    # City economy
    city_radius: int = 2
    base_production: int = Field(1, ge=1)
    food_per_citizen: int = 2
    growth_base: int = 20
    growth_step: int = 10
    aqueduct_cap: int = 10
    science_share: int = Field(50, ge=0, le=100)

    # Combat
    combat_round_damage: int = Field(10, gt=0)
    veteran_multiplier: float = 1.5
    fortified_multiplier: float = 1.5
    fortress_multiplier: float = 2.0
    kill_experience: int = 10

    # Units
    heal_per_turn: int = 10
    road_build_turns: int = 2

    # Government
    revolution_min_turns: int = 2
    revolution_max_turns: int = 5

    name_attempts: int = 50

    def city_spacing(self, turn: int) -> int:
        return self.city_spacing_early if turn <= self.early_game_turn else self.city_spacing_late

    def food_box(self, population: int) -> int:
        """Food needed for a city of the given size to grow."""
        if population <= 1:
            return self.growth_base
        if population == 2:
            return self.growth_base + self.growth_step
        return self.growth_base + 2 * self.growth_step + self.growth_step * (population - 3)


DEFAULT_RULES = Rules()


def load_rules(path: str | Path | None = None) -> Rules:
    """Load rules from a JSON file, falling back to $IMPERIUM_RULES, then defaults."""
    path = path or os.environ.get(RULES_ENV)
    if not path:
        return DEFAULT_RULES
    return Rules.model_validate_json(Path(path).read_text())

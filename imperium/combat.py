"""Combat resolution.

Battles are fought in rounds. Each round the attacker wins with probability
A / (A + D), where A and D are the modified attack and defense strengths, and the
loser of the round takes a fixed amount of damage. The fight ends when either
unit drops to zero health, so exactly one unit survives. Randomness comes from an
injected ``random.Random`` so outcomes are reproducible.
"""
from __future__ import annotations
import random
from dataclasses import dataclass

from .config import Rules, DEFAULT_RULES
from .types import Unit, CombatResult, TerrainKind, FortificationState
from .terrain import describe


@dataclass(frozen=True)
class TerrainContext:
    terrain: TerrainKind
    fortress: bool = False
    city_defense: float = 1.0  # walls multiplier of a city on the tile, 1.0 if none


def attack_strength(unit: Unit, rules: Rules = DEFAULT_RULES) -> float:
    strength = float(unit.stats.attack)
    if unit.is_veteran:
        strength *= rules.veteran_multiplier
    return strength


def defense_strength(unit: Unit, ctx: TerrainContext, rules: Rules = DEFAULT_RULES) -> float:
    strength = float(unit.stats.defense)
    if unit.is_veteran:
        strength *= rules.veteran_multiplier
    strength *= describe(ctx.terrain).defense_bonus
    if unit.fortification == FortificationState.FORTIFIED:
        strength *= rules.fortified_multiplier
    if ctx.fortress:
        strength *= rules.fortress_multiplier
    return strength * ctx.city_defense


def win_probability(attack: float, defense: float) -> float:
    if attack <= 0:
        return 0.0
    return attack / (attack + defense)


def resolve(attacker: Unit, defender: Unit, ctx: TerrainContext,
            rng: random.Random, rules: Rules = DEFAULT_RULES) -> CombatResult:
    """Fight to the death without mutating either unit."""
    p = win_probability(attack_strength(attacker, rules), defense_strength(defender, ctx, rules))
    att_hp, def_hp = attacker.health, defender.health
    rounds = 0
    while att_hp > 0 and def_hp > 0:
        rounds += 1
        if rng.random() < p:
            def_hp -= rules.combat_round_damage
        else:
            att_hp -= rules.combat_round_damage
    att_hp, def_hp = max(att_hp, 0), max(def_hp, 0)
    return CombatResult(
        attacker_id=attacker.id,
        defender_id=defender.id,
        attacker_survived=att_hp > 0,
        defender_survived=def_hp > 0,
        attacker_health_delta=att_hp - attacker.health,
        defender_health_delta=def_hp - defender.health,
        rounds=rounds,
    )

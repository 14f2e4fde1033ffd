"""Run a local game between engine AIs (no server needed)."""
import argparse
import json
import logging
import os

from imperium.game import Game
from imperium.config import load_rules
from imperium.events import CityFounded, CombatResolved, TechnologyResearched, GovernmentChanged
from imperium.map_gen import SCENARIOS


def main(argv: list[str] | None = None) -> Game:
    parser = argparse.ArgumentParser(description="Simulate an all-AI Imperium game")
    parser.add_argument("--players", type=int, default=4)
    parser.add_argument("--turns", type=int, default=60)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--scenario", choices=sorted(SCENARIOS), default="banded")
    parser.add_argument("--rules", help="JSON file overriding rule constants")
    parser.add_argument("--dump", help="Write the final full state to this JSON file")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else os.environ.get("IMPERIUM_LOG_LEVEL", "WARNING")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    game = Game(rules=load_rules(args.rules), rng=args.seed)
    highlights: list[str] = []
    game.subscribe(CityFounded, lambda e: highlights.append(
        f"🏛️ {e.city.owner_id} founded {e.city.name}"))
    game.subscribe(CombatResolved, lambda e: highlights.append(
        f"⚔️ {e.result.attacker_id} vs {e.result.defender_id}: "
        f"{'attacker' if e.result.attacker_survived else 'defender'} won"))
    game.subscribe(TechnologyResearched, lambda e: highlights.append(
        f"🔬 {e.player_id} researched {e.tech.value}"))
    game.subscribe(GovernmentChanged, lambda e: highlights.append(
        f"👑 {e.player_id} now {e.government.value}"))

    game.initialize_game([f"AI {i + 1}" for i in range(args.players)], args.scenario, humans=())
    state = game.state

    print("=== IMPERIUM: AI Game ===")
    for p in state.players:
        print(f"  {p.id} ({p.civilization})")
    print()

    while state.turn <= args.turns:
        game.end_turn()
        cities = len(state.cities)
        units = len(state.units)
        techs = " ".join(f"{p.id[-1]}:{len(p.technologies)}" for p in state.players)
        print(f"T{state.turn - 1:3d} | cities={cities:3d} units={units:3d} | techs {techs}", end="")
        for h in highlights:
            print(f"\n     {h}", end="")
        highlights.clear()
        print()

    print("\n=== FINAL ===")
    for p in state.players:
        print(f"  {p.id} ({p.civilization}): {len(state.player_cities(p.id))} cities | "
              f"{len(state.player_units(p.id))} units | gold={p.gold} | science={p.science} | "
              f"{p.government.value} | techs={sorted(t.value for t in p.technologies)}")

    if args.dump:
        with open(args.dump, "w") as f:
            json.dump(game.get_full_state(), f)
        print(f"\nState saved to {args.dump}")
    return game


if __name__ == "__main__":
    main()

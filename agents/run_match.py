"""Run a match via the server API: random agents in the human seats, the engine AI in the rest."""
import logging
import random
import httpx

from agents.random_agent import play_turn as random_play

log = logging.getLogger(__name__)


def run_match(
    base_url: str = "http://localhost:8000",
    num_players: int = 4,
    humans: list[int] | None = None,
    seed: int = 42,
    max_turns: int = 40,
    scenario: str = "grassland",
    client: httpx.Client | None = None,
) -> str:
    humans = humans if humans is not None else [0]
    http = client or httpx

    resp = http.post(f"{base_url}/games", json={
        "players": [f"Player {i + 1}" for i in range(num_players)],
        "humans": humans, "seed": seed, "scenario": scenario,
    })
    resp.raise_for_status()
    game = resp.json()
    game_id = game["game_id"]
    player_keys = game["player_keys"]

    print(f"🎮 Created game {game_id} with {num_players} players")
    for i, pid in enumerate(game["players"]):
        print(f"  {pid}: {'Random agent' if pid in player_keys else 'Engine AI'}")

    rngs = {pid: random.Random(seed + i) for i, pid in enumerate(player_keys)}
    spectated = 0

    for _ in range(max_turns * max(len(player_keys), 1)):
        spec = http.get(f"{base_url}/games/{game_id}/spectator", params={"since": spectated}).json()
        spectated += len(spec["events"])
        for e in spec["events"]:
            if e["event"] in ("cityFounded", "combatResolved", "technologyResearched", "governmentChanged"):
                print(f"    T{e['turn']} {e['event']}: {e.get('city') or e.get('combat') or e.get('tech') or e.get('government')}")
        if spec["turn"] > max_turns:
            break
        pid = spec["current_player"]
        if pid not in player_keys:
            log.warning("No seat to play for %s", pid)
            break
        result = random_play(base_url, game_id, player_keys[pid], rngs[pid], http=http)
        if result.get("error") or result.get("done"):
            print(f"  Stopped: {result}")
            break

    final = http.get(f"{base_url}/games/{game_id}/spectator").json()
    print(f"\n=== FINAL (turn {final['turn']}) ===")
    for p in final["players"]:
        cities = sum(1 for c in final["cities"] if c["owner"] == p["id"])
        units = sum(1 for u in final["units"] if u["owner"] == p["id"])
        print(f"  {p['id']} ({p['civ']}): {cities} cities | {units} units | "
              f"gold={p['gold']} | techs={len(p['techs'])} | {p['government']}")
    return game_id


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Run an Imperium match")
    parser.add_argument("--server", default="http://localhost:8000")
    parser.add_argument("--players", type=int, default=4)
    parser.add_argument("--humans", type=int, nargs="*", default=[0],
                        help="Seat indices played by random agents (e.g. --humans 0 2)")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--max-turns", type=int, default=40)
    parser.add_argument("--scenario", default="grassland")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    run_match(
        base_url=args.server,
        num_players=args.players,
        humans=args.humans,
        seed=args.seed,
        max_turns=args.max_turns,
        scenario=args.scenario,
    )

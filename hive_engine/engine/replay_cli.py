"""CLI for replaying a scripted game and printing where it ends up.

Usage::

    python -m hive_engine.engine.replay_cli moves.json

    # Start from a different seed cell, skip the frontier self-check
    python -m hive_engine.engine.replay_cli moves.json --center 3,-1 --no-verify

The script is a JSON list of payloads, or an object with ``options`` and
``moves`` keys::

    {"options": {"starting_player": 1},
     "moves": [{"kind": "place", "slot": 0, "q": 0, "r": 0}, ...]}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from hive_engine.config import settings
from hive_engine.engine.errors import GameEngineError
from hive_engine.engine.game_simulator import (
    SimulationState,
    new_simulation,
    play_payloads,
)
from hive_engine.engine.models import GameConfig, Player, PlayerId
from hive_engine.engine.registry import create_default_registry

logger = logging.getLogger(__name__)


def load_script(path: Path) -> tuple[dict, list[dict]]:
    """Read a replay file. Returns (options, payloads)."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return {}, data
    if isinstance(data, dict) and isinstance(data.get("moves"), list):
        return dict(data.get("options", {})), data["moves"]
    raise ValueError(f"{path}: expected a list of moves or an object with 'moves'")


def format_state(state: SimulationState, view: dict) -> str:
    lines = [f"Status: {view['status']} (turn {view['turn']})"]
    if view["message"]:
        lines.append(f"  {view['message']}")
    else:
        lines.append(f"  To move: {view['player_to_move']}")
    lines.append("Board:")
    for key, tile in view["board"].items():
        stacked = f" (stack of {tile['height']})" if tile["height"] > 1 else ""
        owner = state.players[tile["player_id"]].display_name
        lines.append(f"  {key:>7s}  {owner:<8s} {tile['species']}{stacked}")
    return "\n".join(lines)


def _coordinate(text: str) -> tuple[int, int]:
    """Parse a `q,r` command-line value."""
    parts = text.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected q,r, got {text!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected integer q,r, got {text!r}") from None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Replay a scripted Hive game")
    parser.add_argument("script", type=Path, help="JSON file with the moves to play")
    parser.add_argument("--game", default="hive")
    parser.add_argument("--center", type=_coordinate, default=None, help="Seed cell as q,r")
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip the frontier consistency check after each move",
    )
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper())

    try:
        plugin = create_default_registry().get(args.game)
    except KeyError as e:
        print(str(e), file=sys.stderr)
        return 1

    try:
        options, payloads = load_script(args.script)
    except (OSError, ValueError) as e:
        print(f"Cannot read {args.script}: {e}", file=sys.stderr)
        return 1

    if args.center is not None:
        options["center_q"], options["center_r"] = args.center
    if args.no_verify:
        options["verify_invariants"] = False

    players = [
        Player(player_id=PlayerId("p0"), display_name=settings.first_player_name, seat_index=0),
        Player(player_id=PlayerId("p1"), display_name=settings.second_player_name, seat_index=1),
    ]

    try:
        state = new_simulation(plugin, players, GameConfig(options=options))
        logger.info(f"Replaying {len(payloads)} moves from {args.script}")
        play_payloads(plugin, state, payloads)
    except (GameEngineError, ValueError) as e:
        print(f"Replay stopped: {e}", file=sys.stderr)
        return 1

    view = plugin.get_player_view(state.game_data, state.phase, None, players)
    print(format_state(state, view))
    return 0


if __name__ == "__main__":
    sys.exit(main())

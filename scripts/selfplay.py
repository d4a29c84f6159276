#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import random
import sys
import time
from collections import Counter
from typing import Any, Dict, List

# Ensure repo root (which contains `chessrules/`) is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from chessrules.engine.game import STARTPOS_FEN, game_from_fen, is_terminal, result
from chessrules.search.policy import automated_move


def play_game(fen: str, rng: random.Random, max_plies: int) -> Dict[str, Any]:
    """Play random-vs-random from ``fen`` until mate, stalemate, or ``max_plies``."""
    state = game_from_fen(fen)
    while not is_terminal(state) and len(state.move_history) < max_plies:
        state = automated_move(state, rng)
    return {
        "result": result(state),
        "plies": len(state.move_history),
        "checkmate": state.is_checkmate,
        "stalemate": state.is_stalemate,
        "final_fen": state.to_fen(),
        "moves": [m.notation() for m in state.move_history],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Play random self-play games")
    parser.add_argument("--fen", type=str, default=STARTPOS_FEN, help="Start FEN (default: startpos)")
    parser.add_argument("--games", type=int, default=10, help="Number of games (default: 10)")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible runs")
    parser.add_argument(
        "--max-plies", type=int, default=300, help="Adjourn a game after this many plies"
    )
    parser.add_argument("--out", type=str, default=None, help="Write JSON results to file path")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    games: List[Dict[str, Any]] = []
    t0 = time.perf_counter()
    for idx in range(1, max(1, args.games) + 1):
        g = play_game(args.fen, rng, args.max_plies)
        sys.stderr.write(f"[{idx}/{args.games}] {g['result']} in {g['plies']} plies\n")
        games.append(g)

    summary = {
        "games": len(games),
        "results": dict(Counter(g["result"] for g in games)),
        "avg_plies": sum(g["plies"] for g in games) / max(1, len(games)),
        "time_ms": int((time.perf_counter() - t0) * 1000),
        "seed": args.seed,
    }
    payload = {"summary": summary, "games": games}
    text = json.dumps(payload, indent=2 if args.pretty else None)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        print(text)


if __name__ == "__main__":
    main()

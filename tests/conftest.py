import os
import sys
from typing import Callable, Iterable, Tuple

import pytest


# Ensure the repository root is on sys.path for `from chessrules...` imports
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from chessrules.engine.game import GameState, apply_move, initial_game_state  # noqa: E402
from chessrules.engine.move import str_to_square  # noqa: E402


Play = Callable[[GameState, Iterable[Tuple[str, str]]], GameState]


def _play(state: GameState, moves: Iterable[Tuple[str, str]]) -> GameState:
    for fr, to in moves:
        state = apply_move(state, str_to_square(fr), str_to_square(to))
    return state


@pytest.fixture
def play() -> Play:
    """Apply a sequence of ``("e2", "e4")`` pairs through the validating API."""
    return _play


@pytest.fixture
def fools_mate() -> GameState:
    """1. f3 e5 2. g4 Qh4#"""
    return _play(
        initial_game_state(),
        [("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")],
    )

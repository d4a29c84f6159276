from __future__ import annotations

import random

from chessrules.engine.game import GameState, game_from_fen
from chessrules.search.policy import automated_move, select_move


def test_stalemate_root_returns_input_unchanged() -> None:
    # Black to move is stalemated (not in check, no legal moves)
    # Position: Kg6, Qf7 vs kh8, black to move and stalemated
    s = game_from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert s.is_stalemate is True
    assert automated_move(s, random.Random(0)) is s
    assert select_move(s, random.Random(0)) is None


def test_checkmate_root_returns_input_unchanged() -> None:
    # Black to move is checkmated (in check, no legal moves)
    # Position: Qg7, Kg6 vs kh8, checkmate
    s = game_from_fen("7k/6Q1/6K1/8/8/8/8/8 b - - 0 1")
    assert s.is_checkmate is True
    assert automated_move(s, random.Random(0)) is s


def test_fools_mate_loser_gets_no_move(fools_mate: GameState) -> None:
    assert automated_move(fools_mate) is fools_mate

from __future__ import annotations

import random
from typing import Optional

from chessrules.engine.attacks import is_in_check
from chessrules.engine.game import (
    GameState,
    initial_game_state,
    is_terminal,
    legal_moves,
)
from chessrules.engine.move import str_to_square
from chessrules.engine.piece import Color
from chessrules.search.policy import RandomPolicy, automated_move, select_move


def test_automated_move_flips_turn() -> None:
    s = initial_game_state()
    s2 = automated_move(s, random.Random(7))
    assert s2.current_turn is Color.BLACK
    assert len(s2.move_history) == 1
    mv = s2.last_move
    assert mv is not None
    assert mv.to_sq in legal_moves(s, mv.from_sq)


def test_same_seed_same_move() -> None:
    s = initial_game_state()
    a = automated_move(s, random.Random(1234))
    b = automated_move(s, random.Random(1234))
    assert a.last_move == b.last_move


def test_select_move_picks_from_legal_set() -> None:
    s = initial_game_state()
    rng = random.Random(3)
    for _ in range(20):
        choice = select_move(s, rng)
        assert choice is not None
        fr, to = choice
        assert to in legal_moves(s, fr)


def test_random_policy_is_seedable() -> None:
    s = initial_game_state()
    assert RandomPolicy(seed=5).select_move(s) == RandomPolicy(seed=5).select_move(s)


def test_computer_color_gate() -> None:
    s = initial_game_state()
    assert automated_move(s, random.Random(0), computer_color=Color.BLACK) is s
    assert automated_move(s, random.Random(0), computer_color=Color.WHITE) is not s


def test_custom_policy_is_used() -> None:
    class FirstKnight:
        def select_move(self, state: GameState):
            return str_to_square("g1"), str_to_square("f3")

    s2 = automated_move(initial_game_state(), policy=FirstKnight())
    assert s2.last_move is not None and s2.last_move.to_uci() == "g1f3"


def test_policy_without_move_leaves_state() -> None:
    class Resigner:
        def select_move(self, state: GameState) -> Optional[tuple]:
            return None

    s = initial_game_state()
    assert automated_move(s, policy=Resigner()) is s


def test_random_playout_stays_legal() -> None:
    rng = random.Random(42)
    s = initial_game_state()
    for _ in range(80):
        if is_terminal(s):
            break
        mover = s.current_turn
        for fr, _ in s.board.pieces(mover):
            for to in legal_moves(s, fr):
                target = s.board.piece_at(to)
                assert target is None or target.color is not mover
        nxt = automated_move(s, rng)
        assert nxt.current_turn is mover.opposite
        assert not is_in_check(nxt.board, mover)
        s = nxt


def test_select_move_takes_first_shuffled_piece_with_moves() -> None:
    class NoShuffle(random.Random):
        def shuffle(self, x) -> None:  # type: ignore[override]
            pass

        def choice(self, seq):  # type: ignore[override]
            return seq[0]

    # Pieces are visited in shuffled order (here: row-major), and the first
    # with any destination is used; the a-pawn comes before back-rank pieces.
    choice = select_move(initial_game_state(), NoShuffle())
    assert choice == (str_to_square("a2"), str_to_square("a3"))

from __future__ import annotations

from chessrules.engine.game import (
    GameState,
    game_from_fen,
    has_no_legal_moves,
    initial_game_state,
    is_terminal,
    legal_moves,
    make_move,
    result,
)
from chessrules.engine.move import str_to_square
from chessrules.engine.piece import Color


def test_fools_mate_is_checkmate(fools_mate: GameState) -> None:
    s = fools_mate
    assert s.current_turn is Color.WHITE
    assert s.is_check and s.is_checkmate and not s.is_stalemate
    assert is_terminal(s)
    assert result(s) == "0-1"
    # Every white piece is out of moves
    for sq, _ in s.board.pieces(Color.WHITE):
        assert legal_moves(s, sq) == []
    mv = s.last_move
    assert mv is not None and mv.is_check and mv.is_checkmate
    assert [m.notation() for m in s.move_history] == ["f2f3", "e7e5", "g2g4", "Qd8h4#"]


def test_check_without_mate(play) -> None:
    # 1. e4 f6 2. Qh5+ : black can block with g6
    s = play(initial_game_state(), [("e2", "e4"), ("f7", "f6"), ("d1", "h5")])
    assert s.is_check and not s.is_checkmate and not s.is_stalemate
    assert not is_terminal(s)
    assert s.last_move is not None and s.last_move.notation() == "Qd1h5+"
    assert legal_moves(s, str_to_square("g7")) == [str_to_square("g6")]


def test_stalemate_after_move() -> None:
    # White queen e7 to f7 boxes in the black king on h8 without check
    s = game_from_fen("7k/4Q3/6K1/8/8/8/8/8 w - - 0 1")
    assert not is_terminal(s)
    s2 = make_move(s, str_to_square("e7"), str_to_square("f7"))
    assert s2.is_stalemate
    assert not s2.is_check and not s2.is_checkmate
    assert result(s2) == "1/2-1/2"
    assert s2.last_move is not None and not s2.last_move.is_check


def test_mate_after_move_sets_flags_on_record() -> None:
    # Queen e7 to g7 mates the king on h8 (protected by king g6)
    s = game_from_fen("7k/4Q3/6K1/8/8/8/8/8 w - - 0 1")
    s2 = make_move(s, str_to_square("e7"), str_to_square("g7"))
    assert s2.is_checkmate
    assert result(s2) == "1-0"
    assert s2.last_move is not None and s2.last_move.notation() == "Qe7g7#"


def test_has_no_legal_moves() -> None:
    assert not has_no_legal_moves(initial_game_state())
    assert has_no_legal_moves(game_from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"))


def test_fullmove_number_in_fen(play) -> None:
    s = play(initial_game_state(), [("e2", "e4"), ("e7", "e5")])
    assert s.to_fen().endswith(" w - - 0 2")
    assert result(s) == "*"

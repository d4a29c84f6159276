from __future__ import annotations

import copy

import pytest

from chessrules.engine.attacks import is_in_check
from chessrules.engine.game import (
    GameState,
    IllegalMoveError,
    STARTPOS_FEN,
    apply_move,
    initial_game_state,
    legal_moves,
    make_move,
)
from chessrules.engine.move import Square, str_to_square
from chessrules.engine.piece import Color, Piece, PieceKind


def sq(name: str) -> Square:
    return str_to_square(name)


def test_initial_legal_moves() -> None:
    s = initial_game_state()
    assert legal_moves(s, (6, 4)) == [Square(5, 4), Square(4, 4)]
    assert set(legal_moves(s, (7, 1))) == {Square(5, 0), Square(5, 2)}


def test_no_moves_for_empty_or_opponent_square() -> None:
    s = initial_game_state()
    assert legal_moves(s, sq("e4")) == []
    assert legal_moves(s, sq("e7")) == []  # black pawn, white to move
    assert legal_moves(s, (9, 9)) == []


def test_legal_moves_is_idempotent() -> None:
    s = initial_game_state()
    assert legal_moves(s, sq("g1")) == legal_moves(s, sq("g1"))


def test_apply_returns_new_state_and_does_not_mutate() -> None:
    s = initial_game_state()
    snapshot = copy.deepcopy(s)

    s2 = apply_move(s, sq("e2"), sq("e4"))

    # Original state unchanged
    assert s == snapshot
    assert s.to_fen() == STARTPOS_FEN
    # New state reflects move and side toggled
    assert s2.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - - 0 1"
    assert s2.current_turn is Color.BLACK
    assert s2.board is not s.board
    assert s2.board.grid[0] is not s.board.grid[0]


def test_move_record_and_has_moved() -> None:
    s = apply_move(initial_game_state(), sq("g1"), sq("f3"))
    mv = s.last_move
    assert mv is not None
    assert mv.from_sq == sq("g1") and mv.to_sq == sq("f3")
    # Record keeps the pre-move snapshot; the board holds the moved copy
    assert mv.piece == Piece(PieceKind.KNIGHT, Color.WHITE)
    assert s.board.piece_at(sq("f3")) == Piece(PieceKind.KNIGHT, Color.WHITE, has_moved=True)
    assert s.board.piece_at(sq("g1")) is None
    assert mv.captured_piece is None
    assert s.move_history == (mv,)
    assert mv.notation() == "Ng1f3"


def test_capture_is_recorded() -> None:
    s = initial_game_state()
    for fr, to in [("e2", "e4"), ("d7", "d5"), ("e4", "d5")]:
        s = apply_move(s, sq(fr), sq(to))
    assert s.last_move is not None
    assert s.last_move.captured_piece == Piece(PieceKind.PAWN, Color.BLACK)
    assert s.board.piece_at(sq("d5")).color is Color.WHITE  # type: ignore[union-attr]
    assert len(s.move_history) == 3


def test_apply_clears_selection() -> None:
    s = initial_game_state()
    s = GameState(board=s.board, selected_square=sq("e2"), legal_moves=(sq("e3"), sq("e4")))
    s2 = apply_move(s, sq("e2"), sq("e4"))
    assert s2.selected_square is None
    assert s2.legal_moves == ()


def test_apply_rejects_illegal_move() -> None:
    s = initial_game_state()
    # e2e5 is illegal from the start position
    with pytest.raises(IllegalMoveError):
        apply_move(s, sq("e2"), sq("e5"))
    # Moving the opponent's piece is illegal too
    with pytest.raises(ValueError):
        apply_move(s, sq("e7"), sq("e5"))


def test_make_move_trusts_caller() -> None:
    # The unchecked executor moves the pawn three squares without complaint
    s = make_move(initial_game_state(), sq("e2"), sq("e5"))
    assert s.board.piece_at(sq("e5")) is not None
    assert s.current_turn is Color.BLACK


def test_make_move_from_empty_square_is_a_no_op() -> None:
    s = initial_game_state()
    s2 = make_move(s, sq("e4"), sq("e5"))
    assert s2 == s
    assert s2.board is not s.board


@pytest.mark.parametrize("to", [(-1, 4), (5, -1), (8, 4), (4, 8)])
def test_make_move_to_off_board_square_is_a_no_op(to) -> None:
    s = initial_game_state()
    s2 = make_move(s, sq("e2"), to)
    assert s2 == s
    # A negative row must not wrap around onto white's back rank
    assert s2.board.piece_at(sq("e1")) == s.board.piece_at(sq("e1"))
    assert s2.board.piece_at(sq("e2")) is not None


def test_applied_moves_never_leave_own_king_attacked(play) -> None:
    s = play(initial_game_state(), [("e2", "e4"), ("f7", "f6"), ("d1", "h5")])
    # Black is in check from h5; every legal reply must resolve it
    assert s.is_check
    for from_sq, piece in list(s.board.pieces(Color.BLACK)):
        for to in legal_moves(s, from_sq):
            after = apply_move(s, from_sq, to)
            assert not is_in_check(after.board, piece.color)

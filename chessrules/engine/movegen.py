"""Pseudo-legal move generation.

Each generator is a pure function of ``(board, square)`` and returns the
destinations reachable by movement rules alone. Whether the move leaves the
mover's own king attacked is decided later by the legality filter in
``game.py``.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Tuple

from .board import Board, is_valid_square
from .move import Square
from .piece import PieceKind


Generator = Callable[[Board, Square], List[Square]]

ORTHOGONAL: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL: Tuple[Tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)
KING_OFFSETS: Tuple[Tuple[int, int], ...] = ORTHOGONAL + DIAGONAL


def pawn_moves(board: Board, sq: Square) -> List[Square]:
    piece = board.piece_at(sq)
    if piece is None or piece.kind is not PieceKind.PAWN:
        return []

    moves: List[Square] = []
    step = piece.color.forward

    one = Square(sq.row + step, sq.col)
    if is_valid_square(one) and board.piece_at(one) is None:
        moves.append(one)
        if sq.row == piece.color.pawn_row:
            two = Square(sq.row + 2 * step, sq.col)
            if board.piece_at(two) is None:
                moves.append(two)

    for dc in (-1, 1):
        diag = Square(sq.row + step, sq.col + dc)
        target = board.piece_at(diag)
        if target is not None and target.color is not piece.color:
            moves.append(diag)

    # No en passant and no promotion: a pawn on the last rank stays a pawn.
    return moves


def _step_moves(board: Board, sq: Square, offsets: Sequence[Tuple[int, int]]) -> List[Square]:
    piece = board.piece_at(sq)
    if piece is None:
        return []
    moves: List[Square] = []
    for dr, dc in offsets:
        to = Square(sq.row + dr, sq.col + dc)
        if not is_valid_square(to):
            continue
        target = board.piece_at(to)
        if target is None or target.color is not piece.color:
            moves.append(to)
    return moves


def _ray_moves(board: Board, sq: Square, directions: Sequence[Tuple[int, int]]) -> List[Square]:
    piece = board.piece_at(sq)
    if piece is None:
        return []
    moves: List[Square] = []
    for dr, dc in directions:
        to = Square(sq.row + dr, sq.col + dc)
        while is_valid_square(to):
            target = board.piece_at(to)
            if target is None:
                moves.append(to)
            else:
                if target.color is not piece.color:
                    moves.append(to)
                break
            to = Square(to.row + dr, to.col + dc)
    return moves


def knight_moves(board: Board, sq: Square) -> List[Square]:
    return _step_moves(board, sq, KNIGHT_OFFSETS)


def bishop_moves(board: Board, sq: Square) -> List[Square]:
    return _ray_moves(board, sq, DIAGONAL)


def rook_moves(board: Board, sq: Square) -> List[Square]:
    return _ray_moves(board, sq, ORTHOGONAL)


def queen_moves(board: Board, sq: Square) -> List[Square]:
    # Orthogonal and diagonal rays never share a square.
    return rook_moves(board, sq) + bishop_moves(board, sq)


def king_moves(board: Board, sq: Square) -> List[Square]:
    # No castling.
    return _step_moves(board, sq, KING_OFFSETS)


GENERATORS: Dict[PieceKind, Generator] = {
    PieceKind.PAWN: pawn_moves,
    PieceKind.KNIGHT: knight_moves,
    PieceKind.BISHOP: bishop_moves,
    PieceKind.ROOK: rook_moves,
    PieceKind.QUEEN: queen_moves,
    PieceKind.KING: king_moves,
}


def pseudo_legal_moves(board: Board, sq: Tuple[int, int]) -> List[Square]:
    """Return pseudo-legal destinations for the piece on ``sq`` ([] if empty)."""
    sq = Square(*sq)
    piece = board.piece_at(sq)
    if piece is None:
        return []
    return GENERATORS[piece.kind](board, sq)

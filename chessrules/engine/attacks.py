from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .board import Board, is_valid_square
from .movegen import DIAGONAL, KING_OFFSETS, KNIGHT_OFFSETS, ORTHOGONAL
from .piece import Color, PieceKind


def _offset_holds(
    board: Board,
    sq: Tuple[int, int],
    offsets: Sequence[Tuple[int, int]],
    kind: PieceKind,
    color: Color,
) -> bool:
    row, col = sq
    for dr, dc in offsets:
        p = board.piece_at((row + dr, col + dc))
        if p is not None and p.kind is kind and p.color is color:
            return True
    return False


def _ray_hits(
    board: Board,
    sq: Tuple[int, int],
    directions: Sequence[Tuple[int, int]],
    kinds: Tuple[PieceKind, PieceKind],
    color: Color,
) -> bool:
    for dr, dc in directions:
        r, c = sq[0] + dr, sq[1] + dc
        while is_valid_square((r, c)):
            p = board.piece_at((r, c))
            if p is not None:
                # First piece on the ray either attacks or blocks.
                if p.color is color and p.kind in kinds:
                    return True
                break
            r += dr
            c += dc
    return False


def is_square_attacked(board: Board, sq: Tuple[int, int], by_color: Color) -> bool:
    """Return True if ``sq`` is attacked by any piece of ``by_color``.

    Covers: pawns, knights, king, and slider rays for bishops/rooks/queens.
    Works from the target square outwards, so it never calls the move
    generators and cannot recurse through the legality filter.
    """
    # A pawn attacks diagonally forward, so look one step *behind* the target
    # from the attacker's point of view.
    row, col = sq
    behind = row - by_color.forward
    for dc in (-1, 1):
        p = board.piece_at((behind, col + dc))
        if p is not None and p.kind is PieceKind.PAWN and p.color is by_color:
            return True

    if _offset_holds(board, sq, KNIGHT_OFFSETS, PieceKind.KNIGHT, by_color):
        return True
    if _ray_hits(board, sq, ORTHOGONAL, (PieceKind.ROOK, PieceKind.QUEEN), by_color):
        return True
    if _ray_hits(board, sq, DIAGONAL, (PieceKind.BISHOP, PieceKind.QUEEN), by_color):
        return True
    return _offset_holds(board, sq, KING_OFFSETS, PieceKind.KING, by_color)


def is_in_check(board: Board, color: Color) -> bool:
    """Return True if ``color``'s king is attacked; False when it has no king."""
    king_sq: Optional[Tuple[int, int]] = board.find_king(color)
    if king_sq is None:
        return False
    return is_square_attacked(board, king_sq, color.opposite)

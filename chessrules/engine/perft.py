from __future__ import annotations

from typing import Dict

from .board import Board
from .game import GameState, legal_destinations
from .move import square_to_str
from .piece import Color


def perft(state: GameState, depth: int) -> int:
    """Compute perft node count for ``state`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Walks boards directly instead of going through ``make_move`` so that the
    per-node status derivation (mate/stalemate scans) is not paid at every leaf.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    return _perft(state.board, state.current_turn, depth)


def perft_divide(state: GameState, depth: int) -> Dict[str, int]:
    """Per-root-move node counts keyed by UCI string, for debugging mismatches."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out: Dict[str, int] = {}
    board, color = state.board, state.current_turn
    for fr, _ in list(board.pieces(color)):
        for to in legal_destinations(board, fr):
            key = square_to_str(fr) + square_to_str(to)
            out[key] = _perft(_child(board, fr, to), color.opposite, depth - 1)
    return out


def _perft(board: Board, color: Color, depth: int) -> int:
    if depth == 0:
        return 1
    nodes = 0
    for fr, _ in list(board.pieces(color)):
        dests = legal_destinations(board, fr)
        if depth == 1:
            nodes += len(dests)
            continue
        for to in dests:
            nodes += _perft(_child(board, fr, to), color.opposite, depth - 1)
    return nodes


def _child(board: Board, fr, to) -> Board:
    child = board.clone()
    piece = child.piece_at(fr)
    child.put(to, piece.moved() if piece is not None else None)
    child.put(fr, None)
    return child

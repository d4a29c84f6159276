from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .move import Square
from .piece import Color, Piece, PieceKind, piece_from_char


STARTPOS_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

BACK_RANK = [
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
]

Grid = List[List[Optional[Piece]]]


def is_valid_square(sq: Tuple[int, int]) -> bool:
    row, col = sq
    return 0 <= row < 8 and 0 <= col < 8


def same_square(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    return a[0] == b[0] and a[1] == b[1]


def _empty_grid() -> Grid:
    return [[None] * 8 for _ in range(8)]


@dataclass
class Board:
    """8x8 mailbox board indexed ``[row][col]``.

    Notes:
    - Row 0 is black's back rank, row 7 is white's back rank.
    - Pieces are frozen values, so cloning the grid is enough to get a fully
      independent board. Callers treat a board held by a ``GameState`` as
      read-only and clone before any speculative change.
    """

    grid: Grid

    @classmethod
    def empty(cls) -> "Board":
        return cls(grid=_empty_grid())

    @classmethod
    def initial(cls) -> "Board":
        """Create a board set up in the standard starting position."""
        grid = _empty_grid()
        for col, kind in enumerate(BACK_RANK):
            grid[0][col] = Piece(kind, Color.BLACK)
            grid[1][col] = Piece(PieceKind.PAWN, Color.BLACK)
            grid[6][col] = Piece(PieceKind.PAWN, Color.WHITE)
            grid[7][col] = Piece(kind, Color.WHITE)
        return cls(grid=grid)

    @classmethod
    def from_fen(cls, placement: str) -> "Board":
        """Create a board from the piece-placement field of a FEN string.

        Args:
            placement (str): Placement such as ``"8/8/8/8/8/8/8/K6k"``. FEN lists
                rank 8 first, which is row 0 of the grid.

        Raises:
            ValueError: If the placement does not describe exactly 8 ranks of
                8 squares or contains an unknown piece character.
        """
        if not placement or not isinstance(placement, str):
            raise ValueError("FEN placement must be a non-empty string")
        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        grid = _empty_grid()
        for row, rank in enumerate(ranks):
            col = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    col += n
                else:
                    if col >= 8:
                        raise ValueError("too many squares in FEN rank")
                    grid[row][col] = piece_from_char(ch)
                    col += 1
            if col != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")
        return cls(grid=grid)

    def to_fen(self) -> str:
        """Serialize the piece placement into FEN form."""
        ranks: List[str] = []
        for row in self.grid:
            out = ""
            empty = 0
            for piece in row:
                if piece is None:
                    empty += 1
                    continue
                if empty:
                    out += str(empty)
                    empty = 0
                out += piece.to_char()
            if empty:
                out += str(empty)
            ranks.append(out)
        return "/".join(ranks)

    def rows(self) -> List[str]:
        """One string per row, ``"."`` for empty squares (row 0 first)."""
        return ["".join(p.to_char() if p else "." for p in row) for row in self.grid]

    def piece_at(self, sq: Tuple[int, int]) -> Optional[Piece]:
        """Return the piece on ``sq``; off-board squares read as empty."""
        if not is_valid_square(sq):
            return None
        return self.grid[sq[0]][sq[1]]

    def clone(self) -> "Board":
        return Board(grid=[list(row) for row in self.grid])

    def put(self, sq: Tuple[int, int], piece: Optional[Piece]) -> None:
        """Place (or clear with ``None``) a piece in-place. Use on clones only."""
        self.grid[sq[0]][sq[1]] = piece

    def find_king(self, color: Color) -> Optional[Square]:
        for sq, piece in self.pieces(color):
            if piece.kind is PieceKind.KING:
                return sq
        return None

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[Square, Piece]]:
        """Yield ``(square, piece)`` in row-major order, optionally filtered by color."""
        for row in range(8):
            for col in range(8):
                piece = self.grid[row][col]
                if piece is not None and (color is None or piece.color is color):
                    yield Square(row, col), piece

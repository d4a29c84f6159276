from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from .piece import Piece, PieceKind


class Square(NamedTuple):
    """Board coordinate. Row 0 is rank 8, column 0 is file a."""

    row: int
    col: int


_NOTATION_LETTERS = {
    PieceKind.PAWN: "",
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}


@dataclass(frozen=True)
class Move:
    """Historical record of an executed move.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.
        piece (Piece): Snapshot of the moving piece before the move.
        captured_piece (Optional[Piece]): Piece that stood on ``to_sq``, if any.
        is_check (bool): The move left the opponent in check.
        is_checkmate (bool): The move mated the opponent.
    """

    from_sq: Square
    to_sq: Square
    piece: Piece
    captured_piece: Optional[Piece] = None
    is_check: bool = False
    is_checkmate: bool = False

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form, e.g. ``"e2e4"``."""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq)

    def notation(self) -> str:
        """Long-form notation with piece letter and check suffix.

        Examples: ``"e2e4"``, ``"Ng1f3"``, ``"Qd8h4#"``.
        """
        base = _NOTATION_LETTERS[self.piece.kind] + self.to_uci()
        if self.is_checkmate:
            return base + "#"
        if self.is_check:
            return base + "+"
        return base


def parse_uci(uci: str) -> Tuple[Square, Square]:
    """Parse a UCI move string into ``(from_sq, to_sq)``.

    Raises:
        ValueError: If the string is not four characters naming two squares.
            Promotion suffixes are rejected since promotion is not supported.
    """
    if len(uci) != 4:
        raise ValueError(f"invalid UCI move length: {uci!r}")
    return str_to_square(uci[0:2]), str_to_square(uci[2:4])


def str_to_square(s: str) -> Square:
    """Convert algebraic notation (``"e4"``) into a grid square.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    col = ord(s[0]) - ord("a")
    row = 8 - int(s[1])
    return Square(row, col)


def square_to_str(sq: Tuple[int, int]) -> str:
    """Convert a grid square into algebraic notation.

    Raises:
        ValueError: If ``sq`` is off the board.
    """
    row, col = sq
    if not (0 <= row < 8 and 0 <= col < 8):
        raise ValueError(f"invalid square: {sq!r}")
    return chr(ord("a") + col) + str(8 - row)

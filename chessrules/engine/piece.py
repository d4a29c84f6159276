from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Color(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row delta of a pawn step: white moves up the grid (towards row 0)."""
        return -1 if self is Color.WHITE else 1

    @property
    def pawn_row(self) -> int:
        return 6 if self is Color.WHITE else 1


class PieceKind(str, Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


KIND_TO_CHAR = {
    PieceKind.PAWN: "p",
    PieceKind.KNIGHT: "n",
    PieceKind.BISHOP: "b",
    PieceKind.ROOK: "r",
    PieceKind.QUEEN: "q",
    PieceKind.KING: "k",
}
CHAR_TO_KIND = {v: k for k, v in KIND_TO_CHAR.items()}


@dataclass(frozen=True)
class Piece:
    """Immutable piece value.

    Attributes:
        kind (PieceKind): Piece type.
        color (Color): Owning side.
        has_moved (bool): Set once the piece has been moved by the executor.
    """

    kind: PieceKind
    color: Color
    has_moved: bool = False

    def to_char(self) -> str:
        """FEN character: uppercase for white, lowercase for black."""
        ch = KIND_TO_CHAR[self.kind]
        return ch.upper() if self.color is Color.WHITE else ch

    def moved(self) -> "Piece":
        return replace(self, has_moved=True)


def piece_from_char(ch: str) -> Piece:
    """Parse a FEN piece character.

    Raises:
        ValueError: If ``ch`` is not one of ``PNBRQKpnbrqk``.
    """
    kind = CHAR_TO_KIND.get(ch.lower()) if len(ch) == 1 else None
    if kind is None:
        raise ValueError(f"invalid piece in FEN: {ch!r}")
    return Piece(kind, Color.WHITE if ch.isupper() else Color.BLACK)

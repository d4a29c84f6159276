from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .attacks import is_in_check
from .board import STARTPOS_PLACEMENT, Board, is_valid_square, same_square
from .move import Move, Square
from .movegen import pseudo_legal_moves
from .piece import Color


STARTPOS_FEN = f"{STARTPOS_PLACEMENT} w - - 0 1"


class IllegalMoveError(ValueError):
    """Raised by ``apply_move`` when the destination is not a legal move."""

    def __init__(self, from_sq: Tuple[int, int], to_sq: Tuple[int, int]) -> None:
        super().__init__(f"illegal move: {tuple(from_sq)} -> {tuple(to_sq)}")
        self.from_sq = from_sq
        self.to_sq = to_sq


@dataclass(frozen=True)
class GameState:
    """Complete, immutable snapshot of a game.

    Responsibility: hold the board, the side to move, the history and the
    derived status flags. Every engine operation returns a new ``GameState``
    built on a freshly cloned board; the input is never modified.

    ``selected_square`` and ``legal_moves`` are a cursor and a cache for the
    UI collaborator and carry no authority: legality is always recomputed.
    """

    board: Board = field(default_factory=Board.initial)
    current_turn: Color = Color.WHITE
    move_history: Tuple[Move, ...] = ()
    selected_square: Optional[Square] = None
    legal_moves: Tuple[Square, ...] = ()
    is_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    last_move: Optional[Move] = None

    def to_fen(self) -> str:
        """Serialize to FEN. Castling and en passant fields are always ``-``."""
        side = "w" if self.current_turn is Color.WHITE else "b"
        fullmove = len(self.move_history) // 2 + 1
        return f"{self.board.to_fen()} {side} - - 0 {fullmove}"


def _copy(state: GameState, **changes: object) -> GameState:
    return replace(state, board=state.board.clone(), **changes)


def initial_game_state() -> GameState:
    """Standard starting position, white to move, empty history."""
    return GameState(board=Board.initial())


def game_from_fen(fen: str) -> GameState:
    """Create a game from a FEN string.

    Only the placement and side-to-move fields are used; castling, en passant
    and the move counters are accepted and ignored. Status flags are derived
    for the side to move, so a mated or stalemated position loads as such.

    Raises:
        ValueError: If ``fen`` is empty, the placement is invalid, or the side
            to move is not ``w`` or ``b``.
    """
    if not fen or not isinstance(fen, str):
        raise ValueError("FEN must be a non-empty string")
    parts = fen.strip().split()
    if not parts:
        raise ValueError("FEN must be a non-empty string")
    if len(parts) > 6:
        raise ValueError("FEN must have at most 6 fields")
    board = Board.from_fen(parts[0])
    stm = parts[1] if len(parts) > 1 else "w"
    if stm not in ("w", "b"):
        raise ValueError("side to move must be 'w' or 'b'")
    state = GameState(board=board, current_turn=Color.WHITE if stm == "w" else Color.BLACK)
    check = is_in_check(board, state.current_turn)
    no_moves = has_no_legal_moves(state)
    return replace(
        state,
        is_check=check,
        is_checkmate=check and no_moves,
        is_stalemate=(not check) and no_moves,
    )


def legal_destinations(board: Board, from_sq: Tuple[int, int]) -> List[Square]:
    """Filter pseudo-legal destinations of the piece on ``from_sq``.

    Each candidate is simulated on its own clone (capture by overwrite) and
    kept only if the mover's king is not attacked afterwards.
    """
    piece = board.piece_at(from_sq)
    if piece is None:
        return []
    legal: List[Square] = []
    for to in pseudo_legal_moves(board, from_sq):
        sim = board.clone()
        sim.put(to, piece)
        sim.put(from_sq, None)
        if not is_in_check(sim, piece.color):
            legal.append(to)
    return legal


def legal_moves(state: GameState, sq: Tuple[int, int]) -> List[Square]:
    """Legal destinations for the piece on ``sq``.

    Returns [] for an invalid or empty square, or a piece of the side not to move.
    """
    piece = state.board.piece_at(sq)
    if piece is None or piece.color is not state.current_turn:
        return []
    return legal_destinations(state.board, sq)


def has_no_legal_moves(state: GameState) -> bool:
    """Return True if no piece of the side to move has a legal destination."""
    for sq, _ in state.board.pieces(state.current_turn):
        if legal_destinations(state.board, sq):
            return False
    return True


def make_move(state: GameState, from_sq: Tuple[int, int], to_sq: Tuple[int, int]) -> GameState:
    """Execute a move and derive the new status.

    The destination is trusted: callers must have taken it from
    ``legal_moves(state, from_sq)``. Use ``apply_move`` for a checked variant.
    An empty origin or an off-board destination returns an unchanged copy.
    """
    piece = state.board.piece_at(from_sq)
    if piece is None or not is_valid_square(to_sq):
        return _copy(state)
    from_sq, to_sq = Square(*from_sq), Square(*to_sq)

    board = state.board.clone()
    captured = board.piece_at(to_sq)
    board.put(to_sq, piece.moved())
    board.put(from_sq, None)

    turn = state.current_turn.opposite
    nxt = GameState(board=board, current_turn=turn)

    check = is_in_check(board, turn)
    checkmate = False
    stalemate = False
    if check:
        checkmate = has_no_legal_moves(nxt)
    else:
        stalemate = has_no_legal_moves(nxt)

    move = Move(
        from_sq=from_sq,
        to_sq=to_sq,
        piece=piece,
        captured_piece=captured,
        is_check=check,
        is_checkmate=checkmate,
    )
    return replace(
        nxt,
        move_history=state.move_history + (move,),
        is_check=check,
        is_checkmate=checkmate,
        is_stalemate=stalemate,
        last_move=move,
    )


def apply_move(state: GameState, from_sq: Tuple[int, int], to_sq: Tuple[int, int]) -> GameState:
    """Validate and execute a move.

    Raises:
        IllegalMoveError: If ``to_sq`` is not among ``legal_moves(state, from_sq)``.
    """
    if not any(same_square(to_sq, m) for m in legal_moves(state, from_sq)):
        raise IllegalMoveError(from_sq, to_sq)
    return make_move(state, from_sq, to_sq)


def select_square(state: GameState, sq: Tuple[int, int]) -> GameState:
    """Advance the selection cursor the way a board click does.

    - Nothing selected: an own piece becomes selected with its legal moves cached.
    - Clicking the selected square again clears the selection.
    - Clicking a cached legal destination executes the move.
    - Clicking another own piece switches the selection to it.
    - Anything else clears the selection.
    """
    sq = Square(*sq)
    piece = state.board.piece_at(sq)
    own = piece is not None and piece.color is state.current_turn
    selected = state.selected_square

    if selected is not None:
        if same_square(selected, sq):
            return _copy(state, selected_square=None, legal_moves=())
        if any(same_square(sq, m) for m in state.legal_moves):
            return make_move(state, selected, sq)
    if own:
        return _copy(state, selected_square=sq, legal_moves=tuple(legal_moves(state, sq)))
    return _copy(state, selected_square=None, legal_moves=())


def is_terminal(state: GameState) -> bool:
    return state.is_checkmate or state.is_stalemate


def result(state: GameState) -> str:
    """PGN-style result string: ``1-0``, ``0-1``, ``1/2-1/2`` or ``*``."""
    if state.is_checkmate:
        return "0-1" if state.current_turn is Color.WHITE else "1-0"
    if state.is_stalemate:
        return "1/2-1/2"
    return "*"

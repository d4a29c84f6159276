from __future__ import annotations

import logging
import random
from typing import List, Optional, Protocol, Tuple

from chessrules.engine.game import GameState, is_terminal, legal_moves, make_move
from chessrules.engine.move import Square, square_to_str
from chessrules.engine.piece import Color


logger = logging.getLogger(__name__)

Choice = Tuple[Square, Square]


class MovePolicy(Protocol):
    """Anything that picks a ``(from, to)`` pair for the side to move."""

    def select_move(self, state: GameState) -> Optional[Choice]: ...


def select_move(state: GameState, rng: random.Random) -> Optional[Choice]:
    """Pick a uniformly random destination of the first shuffled piece that can move.

    Own pieces are visited in shuffled order; the first one with any legal
    destination wins and one of its destinations is drawn uniformly. This is
    not uniform over all legal moves: pieces with few moves are favoured.
    Returns None when the side to move has no legal move.
    """
    squares: List[Square] = [sq for sq, _ in state.board.pieces(state.current_turn)]
    rng.shuffle(squares)
    for fr in squares:
        dests = legal_moves(state, fr)
        if dests:
            return fr, rng.choice(dests)
    return None


class RandomPolicy:
    """Uniform random opponent driven by an explicit, optionally seeded RNG."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)

    def select_move(self, state: GameState) -> Optional[Choice]:
        return select_move(state, self.rng)


def automated_move(
    state: GameState,
    rng: Optional[random.Random] = None,
    *,
    computer_color: Optional[Color] = None,
    policy: Optional[MovePolicy] = None,
) -> GameState:
    """Let the computer play one move.

    Returns ``state`` itself when the game is over, when ``computer_color`` is
    given and it is not that side's turn, or when the policy finds no move.
    ``policy`` defaults to a ``RandomPolicy`` over ``rng``.
    """
    if is_terminal(state):
        return state
    if computer_color is not None and state.current_turn is not computer_color:
        return state
    if policy is None:
        policy = RandomPolicy(rng=rng if rng is not None else random.Random())

    choice = policy.select_move(state)
    if choice is None:
        logger.warning("no move found for %s", state.current_turn.value)
        return state
    fr, to = choice
    logger.debug(
        "automated move",
        extra={"color": state.current_turn.value, "move": square_to_str(fr) + square_to_str(to)},
    )
    return make_move(state, fr, to)

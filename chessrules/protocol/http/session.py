from __future__ import annotations

import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from ...engine.game import GameState, initial_game_state
from ...engine.piece import Color


logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """One game owned by one client.

    Each session exclusively owns its ``GameState`` value; the engine never
    mutates a state, so replacing ``state`` is the only update.
    """

    state: GameState = field(default_factory=initial_game_state)
    computer_player: Optional[Color] = None
    rng: random.Random = field(default_factory=random.Random)



def next_computer_player(current: Optional[Color]) -> Optional[Color]:
    """Cycle the computer side: black, then white, then nobody, then black again."""
    if current is Color.BLACK:
        return Color.WHITE
    if current is Color.WHITE:
        return None
    return Color.BLACK


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Retrieve existing sessions by `game_id`
    - Replace a session's state or computer side
    - Delete sessions
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[str, GameSession] = {}

    def create(self, session: Optional[GameSession] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        if session is None:
            session = GameSession()
        with self._lock:
            self._sessions[gid] = session
        logger.info("session created", extra={"game_id": gid})
        return gid

    def get(self, game_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(game_id)

    def set_state(self, game_id: str, state: GameState) -> None:
        with self._lock:
            if game_id not in self._sessions:
                raise KeyError(game_id)
            self._sessions[game_id].state = state

    def set_computer_player(self, game_id: str, color: Optional[Color]) -> None:
        with self._lock:
            if game_id not in self._sessions:
                raise KeyError(game_id)
            self._sessions[game_id].computer_player = color
        logger.info(
            "computer player changed",
            extra={"game_id": game_id, "computer_player": color.value if color else None},
        )

    def delete(self, game_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(game_id, None) is not None
        if removed:
            logger.info("session deleted", extra={"game_id": game_id})
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

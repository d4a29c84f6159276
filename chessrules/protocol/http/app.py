from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    illegal_move_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import GameSession, InMemorySessionStore, next_computer_player
from ...engine.game import (
    STARTPOS_FEN,
    GameState,
    IllegalMoveError,
    apply_move,
    game_from_fen,
    initial_game_state,
    is_terminal,
    legal_moves,
    result,
    select_square,
)
from ...engine.move import Square, parse_uci, square_to_str, str_to_square
from ...engine.perft import perft as perft_nodes
from ...engine.piece import Color
from ...search.policy import automated_move


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    computer_player: Optional[Color] = Field(default=None, description="Side played by the computer")
    fen: Optional[str] = Field(default=None, description="Start from this FEN instead of startpos")
    seed: Optional[int] = Field(default=None, description="Seed for the computer's RNG")


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: str = Field(..., description="UCI move string, e.g., e2e4")


class ComputerPlayerRequest(BaseModel):
    computer_player: Optional[Color] = Field(default=None, description="New computer side; null for none")


class SelectRequest(BaseModel):
    square: str = Field(..., description="Square name, e.g., e2")


class PerftRequest(BaseModel):
    fen: str = Field(default=STARTPOS_FEN, description="FEN string")
    depth: int = Field(default=1, ge=0, le=3)


class MovesResponse(BaseModel):
    square: str
    moves: List[str]


class GameStateResponse(BaseModel):
    game_id: str
    fen: str
    board: List[str]
    current_turn: Color
    selected_square: Optional[str]
    legal_moves: List[str]
    is_check: bool
    is_checkmate: bool
    is_stalemate: bool
    is_terminal: bool
    result: str
    last_move: Optional[str]
    move_history: List[str]
    computer_player: Optional[Color]


def create_app(*, log_level: str = "INFO") -> FastAPI:
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO))

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(IllegalMoveError, illegal_move_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        req = req or CreateGameRequest()
        state = _state_from_fen(req.fen) if req.fen else initial_game_state()
        session = GameSession(
            state=state,
            computer_player=req.computer_player,
            rng=random.Random(req.seed),
        )
        game_id = store.create(session)
        return CreateGameResponse(game_id=game_id, fen=state.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameStateResponse)
    async def get_state(game_id: str) -> GameStateResponse:
        return _view(game_id, _require_session(store, game_id))

    @app.get("/api/games/{game_id}/moves/{square}", response_model=MovesResponse)
    async def get_moves(game_id: str, square: str) -> MovesResponse:
        session = _require_session(store, game_id)
        sq = _parse_square(square)
        moves = legal_moves(session.state, sq)
        return MovesResponse(square=square, moves=[square_to_str(m) for m in moves])

    @app.post("/api/games/{game_id}/select", response_model=GameStateResponse)
    async def select(game_id: str, req: SelectRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        sq = _parse_square(req.square)
        store.set_state(game_id, select_square(session.state, sq))
        return _view(game_id, session)

    @app.post("/api/games/{game_id}/move", response_model=GameStateResponse)
    async def make_move(game_id: str, req: MoveRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        try:
            from_sq, to_sq = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        # IllegalMoveError is rendered by illegal_move_handler
        store.set_state(game_id, apply_move(session.state, from_sq, to_sq))
        return _view(game_id, session)

    @app.post("/api/games/{game_id}/computer-move", response_model=GameStateResponse)
    async def computer_move(game_id: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        state = session.state
        if is_terminal(state):
            raise HTTPException(status_code=409, detail="game is over")
        if session.computer_player is not None and state.current_turn is not session.computer_player:
            raise HTTPException(status_code=409, detail="not the computer's turn")
        store.set_state(game_id, automated_move(state, session.rng))
        return _view(game_id, session)

    @app.post("/api/games/{game_id}/computer-player", response_model=GameStateResponse)
    async def set_computer_player(
        game_id: str, req: Optional[ComputerPlayerRequest] = None
    ) -> GameStateResponse:
        session = _require_session(store, game_id)
        # Without a body, cycle black -> white -> none -> black
        if req is None:
            color = next_computer_player(session.computer_player)
        else:
            color = req.computer_player
        store.set_computer_player(game_id, color)
        return _view(game_id, session)

    @app.post("/api/games/{game_id}/position", response_model=GameStateResponse)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameStateResponse:
        session = _require_session(store, game_id)
        store.set_state(game_id, _state_from_fen(req.fen))
        return _view(game_id, session)

    @app.post("/api/games/{game_id}/reset", response_model=GameStateResponse)
    async def reset(game_id: str) -> GameStateResponse:
        session = _require_session(store, game_id)
        store.set_state(game_id, initial_game_state())
        return _view(game_id, session)

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, int]:
        state = _state_from_fen(req.fen)
        return {"nodes": perft_nodes(state, req.depth)}

    return app


def _require_session(store: InMemorySessionStore, game_id: str) -> GameSession:
    session = store.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _parse_square(name: str) -> Square:
    try:
        return str_to_square(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _state_from_fen(fen: str) -> GameState:
    try:
        return game_from_fen(fen)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid FEN")


def _view(game_id: str, session: GameSession) -> GameStateResponse:
    state = session.state
    selected: Optional[Tuple[int, int]] = state.selected_square
    return GameStateResponse(
        game_id=game_id,
        fen=state.to_fen(),
        board=state.board.rows(),
        current_turn=state.current_turn,
        selected_square=square_to_str(selected) if selected is not None else None,
        legal_moves=[square_to_str(m) for m in state.legal_moves],
        is_check=state.is_check,
        is_checkmate=state.is_checkmate,
        is_stalemate=state.is_stalemate,
        is_terminal=is_terminal(state),
        result=result(state),
        last_move=state.last_move.notation() if state.last_move else None,
        move_history=[m.notation() for m in state.move_history],
        computer_player=session.computer_player,
    )


# Default app for non-factory servers
app = create_app()

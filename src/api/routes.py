"""
HTTP routes. Thin: parse the request, call the ChessService, return its response model.

Domain exceptions are translated into HTTP errors by `chess_error_handler` (registered in src/main.py).
Handlers are sync on purpose: FastAPI runs them in its thread pool, which suits the CPU-bound engine search.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.models import (
    BestMoveResponse,
    ErrorResponse,
    GameResponse,
    HealthResponse,
    MoveRequest,
)
from src.core.exceptions import (
    ChessError,
    GameNotFoundError,
    GameOverError,
    InvalidMoveError,
    InvalidPositionError,
    InvalidRequestError,
)
from src.services.chess_service import ChessService

_log = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Most specific first: the first matching entry wins
ERROR_STATUS_CODES: tuple[tuple[type[ChessError], int, str], ...] = (
    (GameNotFoundError, status.HTTP_404_NOT_FOUND, "Game not found"),
    (InvalidMoveError, status.HTTP_400_BAD_REQUEST, "Invalid move"),
    (InvalidPositionError, status.HTTP_400_BAD_REQUEST, "Invalid position"),
    (GameOverError, status.HTTP_400_BAD_REQUEST, "Game over"),
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST, "Invalid request"),
)


def get_chess_service(request: Request) -> ChessService:
    return request.app.state.chess_service


def chess_error_handler(request: Request, exc: Exception) -> JSONResponse:
    for error_type, status_code, title in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            body = ErrorResponse(error=title, details=str(exc))
            return JSONResponse(status_code=status_code, content=body.model_dump())

    _log.exception("Unexpected error while handling %s %s", request.method, request.url.path)
    body = ErrorResponse(error="Internal server error", details=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump()
    )


def request_validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Malformed request bodies are a 400 with the same error body as everything else (instead of FastAPI's 422)."""
    if isinstance(exc, RequestValidationError):
        details = "; ".join(error["msg"] for error in exc.errors())
    else:
        details = str(exc)
    body = ErrorResponse(error="Invalid request", details=details)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse()


@router.post("/games", response_model=GameResponse, status_code=status.HTTP_201_CREATED)
def new_game(service: ChessService = Depends(get_chess_service)) -> GameResponse:
    return service.create_new_game()


@router.get("/games/{game_id}", response_model=GameResponse)
def get_game(game_id: UUID, service: ChessService = Depends(get_chess_service)) -> GameResponse:
    return service.get_game_state(game_id)


@router.post("/games/{game_id}/moves", response_model=GameResponse)
def make_move(
    game_id: UUID,
    move_request: MoveRequest,
    service: ChessService = Depends(get_chess_service),
) -> GameResponse:
    return service.make_move(game_id, move_request)


@router.get("/games/{game_id}/best-move", response_model=BestMoveResponse)
def get_best_move(
    game_id: UUID, service: ChessService = Depends(get_chess_service)
) -> BestMoveResponse:
    return service.computer_move(game_id)


@router.post("/games/{game_id}/computer-move", response_model=GameResponse)
def play_computer_move(
    game_id: UUID, service: ChessService = Depends(get_chess_service)
) -> GameResponse:
    return service.apply_computer_move(game_id)

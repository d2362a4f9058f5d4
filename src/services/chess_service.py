"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID

from src.api.models import BestMoveResponse, GameResponse, MoveRequest
from src.chess.engine import DEFAULT_SEARCH_DEPTH, describe_move
from src.chess.game import Game, Status
from src.core.exceptions import GameNotFoundError, GameOverError
from src.core.models import GameModel
from src.core.shared_types import Color
from src.core.shared_types import Status as StatusName
from src.db.repository import GameRepository

_log = logging.getLogger(__name__)

FINISHED: frozenset[Status] = frozenset({Status.CHECKMATE, Status.STALEMATE, Status.DRAW})


class ChessService:
    """
    Orchestration of layers for chess game.

    Every read-modify-write of a single game happens while holding that game's lock,
    so a move and a status read on the same game never interleave. Different games do not block each other.
    """

    def __init__(
        self, repository: GameRepository, search_depth: int = DEFAULT_SEARCH_DEPTH
    ) -> None:
        self.repo = repository
        self.search_depth = search_depth
        self._locks: dict[UUID, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -- API routes logic ---
    def create_new_game(self) -> GameResponse:
        """Fresh game in the starting position."""
        new_game = Game.new_game()
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        with self._locks_guard:
            self._locks[game_id] = threading.Lock()
        _log.info("Created game %s", game_id)
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, game_id: UUID) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        with self._game_lock(game_id):
            game_model = self._fetch_game(game_id)
        return self._create_game_response(game_id, game_model)

    def make_move(self, game_id: UUID, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""
        with self._game_lock(game_id):
            game = Game.from_model(self._fetch_game(game_id))

            # Attempt the move
            game.make_move(request.from_square, request.to_square)

            after_move = self._store(game_id, game)

        _log.info(
            "Game %s: %s-%s played, status: %s",
            game_id,
            request.from_square,
            request.to_square,
            after_move.status,
        )
        return self._create_game_response(game_id, after_move)

    def computer_move(self, game_id: UUID) -> BestMoveResponse:
        """Let the engine suggest a move for the side to move. The game itself is not changed."""
        with self._game_lock(game_id):
            game = self._playable_game(game_id)
            best_move, engine = game.best_move(self.search_depth)
            notation = describe_move(best_move, game.board)

        nodes_searched, depth = engine.stats()
        _log.info(
            "Game %s: engine suggests %s (score=%d, nodes=%d)",
            game_id,
            best_move,
            best_move.score,
            nodes_searched,
        )
        return BestMoveResponse(
            game_id=game_id,
            from_square=str(best_move.from_square),
            to_square=str(best_move.to_square),
            notation=notation,
            evaluation=best_move.score,
            nodes_searched=nodes_searched,
            depth=depth,
        )

    def apply_computer_move(self, game_id: UUID) -> GameResponse:
        """Let the engine play the move for the side to move."""
        with self._game_lock(game_id):
            game = self._playable_game(game_id)
            best_move, _ = game.best_move(self.search_depth)
            game.make_move(str(best_move.from_square), str(best_move.to_square))
            after_move = self._store(game_id, game)

        _log.info("Game %s: engine played %s, status: %s", game_id, best_move, after_move.status)
        return self._create_game_response(game_id, after_move)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            board=model.board,
            current_turn=Color(model.current_turn),
            status=StatusName(model.status),
            move_history=model.move_history,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model

    def _playable_game(self, game_id: UUID) -> Game:
        """The engine is not asked for a move once the game has ended."""
        game = Game.from_model(self._fetch_game(game_id))
        if game.status in FINISHED:
            raise GameOverError(f"Game is over. status: {game.status.name.lower()}")
        return game

    def _store(self, game_id: UUID, game: Game) -> GameModel:
        stored = self.repo.update_game(game_id, game.to_model())
        if stored is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return stored

    @contextmanager
    def _game_lock(self, game_id: UUID) -> Iterator[None]:
        """Locks are only handed out for games that exist: unknown IDs raise GameNotFoundError and leave no trace."""
        with self._locks_guard:
            lock = self._locks.get(game_id)
            if lock is None:
                self._fetch_game(game_id)
                lock = self._locks[game_id] = threading.Lock()
        with lock:
            yield

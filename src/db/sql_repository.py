"""Implementation of (Game)Repository using SQLAlchemy"""

import threading
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.schema import DBGame


class SQLGameRepository:
    """
    Data stored using SQL / methods implemented using SQLAlchemy

    NOTE: Every call opens its own short-lived session, and only one session is open at a time.
    The in-memory SQLite engine hands every session the same connection (StaticPool), so transactions
    of different request threads must not overlap on it.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._lock = threading.Lock()

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        with self._lock, self.session_factory() as db:
            game_db = self._fetch_game(db, game_id)
            if game_db:
                return self._to_model(game_db)
            return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            board=game.board,
            current_turn=game.current_turn,
            status=game.status,
            move_history=list(game.move_history),
        )
        with self._lock, self.session_factory() as db:
            try:
                db.add(game_db)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise RepositoryError(f"Could not store new game: {exc}") from exc
            db.refresh(game_db)
            return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        with self._lock, self.session_factory() as db:
            game_db = self._fetch_game(db, game_id)
            if not game_db:
                return None
            game_db.board = game.board
            game_db.current_turn = game.current_turn
            game_db.status = game.status
            # assign a new list: in-place changes to a JSON column are not tracked
            game_db.move_history = list(game.move_history)
            try:
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise RepositoryError(f"Could not update game {game_id}: {exc}") from exc
            db.refresh(game_db)
            return self._to_model(game_db)

    def _fetch_game(self, db: Session, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            board=game_db.board,
            current_turn=game_db.current_turn,
            status=game_db.status,
            move_history=list(game_db.move_history),
        )

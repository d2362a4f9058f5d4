"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Self

from src.chess.board import Board
from src.chess.engine import DEFAULT_SEARCH_DEPTH, Engine
from src.chess.moves import ChessMove
from src.chess.pieces import Color
from src.chess.position import Position, parse_move_string
from src.core.exceptions import (
    GameStateError,
    InvalidMoveError,
    InvalidPositionError,
    NotYourTurnError,
)
from src.core.models import GameModel

# Engine depth used for nothing but finding attacks on the king / any moves at all after each turn
STATUS_CHECK_DEPTH = 1


class Status(Enum):
    IN_PROGRESS = auto()
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    DRAW = auto()  # NOTE: never assigned by the current rules


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board = field(default_factory=Board.new)
    current_turn: Color = Color.WHITE
    status: Status = Status.IN_PROGRESS
    move_history: list[str] = field(default_factory=list)

    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, white to move."""
        return cls()

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        status_name = model.status.replace(" ", "_").upper()
        if status_name not in Status.__members__:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.name.lower() for status in Status])}"
            )
        color_name = model.current_turn.upper()
        if color_name not in Color.__members__:
            raise GameStateError(
                f"Invalid color to move: {model.current_turn!r}. \nPick one from {','.join([color.name.lower() for color in Color])}"
            )
        try:
            board = Board.from_placement(model.board)
        except InvalidPositionError as exc:
            raise GameStateError(f"Invalid board: {exc}") from exc

        return cls(
            board=board,
            current_turn=Color[color_name],
            status=Status[status_name],
            move_history=list(model.move_history),
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            board=self.board.to_placement(),
            current_turn=self.current_turn.name.lower(),
            status=self.status.name.lower().replace("_", " "),
            move_history=list(self.move_history),
        )

    @property
    def winner(self) -> Optional[Color]:
        """
        Only defined for checkmate.
        Given we know it is checkmate, the player who is requesting to move just got mated and the opponent must be the winner
        """
        if self.status != Status.CHECKMATE:
            return None
        return self.current_turn.opposite

    def make_move(self, from_square: str, to_square: str) -> None:
        """
        Attempt to make a move
        -----

        1. parse both squares
        2. there should be a piece on the starting square ...
        3. ... and it should be yours
        4. update the board
        5. update the history of moves
        6. hand the turn to the opponent
        7. update game status

        NOTE: Any destination is accepted. Whether the piece can actually move there is NOT checked here.
        """
        from_position = Position.from_str(from_square)
        to_position = Position.from_str(to_square)

        # make sure there is a piece to move, and that it is your turn
        moving_piece = self.board.get(from_position)
        if moving_piece is None:
            raise InvalidMoveError("No piece at source position")
        if moving_piece.color != self.current_turn:
            raise NotYourTurnError("Not your turn")

        # update the board. (Board validates before writing, so a failure leaves the game untouched.)
        self.board.relocate(from_position, to_position)

        self._update_move_history(from_square, to_square)
        self._switch_turns()
        self._update_game_status()

    def make_move_string(self, move: str) -> None:
        """Convenience method: "e2-e4" or "e2e4" """
        from_position, to_position = parse_move_string(move)
        self.make_move(str(from_position), str(to_position))

    def best_move(self, depth: int = DEFAULT_SEARCH_DEPTH) -> tuple[ChessMove, Engine]:
        """Ask a fresh engine for a move. The engine is returned as well, so the caller can read its search statistics."""
        engine = Engine(depth)
        return engine.find_best_move(self), engine

    def is_king_in_check(self, color: Color) -> bool:
        """
        Is the king of `color` attacked by any of the opponent's pseudo-legal moves?

        NOTE: If the king cannot be found at all, consider it in check.
        """
        king_position = self.board.locate_king(color)
        if king_position is None:
            return True

        engine = Engine(STATUS_CHECK_DEPTH)
        opponent_moves = engine.legal_moves(self.board, color.opposite)
        return any(move.to_square == king_position for move in opponent_moves)

    # -- PRIVATE HELPERS ---
    def _has_any_move(self, color: Color) -> bool:
        """NOTE pseudo-legal moves: a move that does not get you out of check still counts."""
        engine = Engine(STATUS_CHECK_DEPTH)
        return len(engine.legal_moves(self.board, color)) > 0

    def _update_move_history(self, from_square: str, to_square: str) -> None:
        self.move_history.append(f"{from_square}-{to_square}")

    def _switch_turns(self) -> None:
        self.current_turn = self.current_turn.opposite

    def _update_game_status(self) -> None:
        """Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already been handed over. At this point the turn player is the opponent of the player that just moved.
        """
        in_check = self.is_king_in_check(self.current_turn)
        has_moves = self._has_any_move(self.current_turn)

        if in_check and has_moves:
            self._change_status(Status.CHECK)
        elif in_check:
            self._change_status(Status.CHECKMATE)
        elif not has_moves:
            self._change_status(Status.STALEMATE)
        else:
            self._change_status(Status.IN_PROGRESS)

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status

"""Requests and Response models"""

from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Status


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        """
        Only checks the shape (a letter followed by a digit).
        Whether the square actually exists on the board is up to the domain layer.
        """

        def _is_algebraic_notation(value: str) -> bool:
            if len(value) != 2:
                return False

            first_character = value[0]
            second_character = value[1]
            if not (first_character.isalpha() and second_character.isnumeric()):
                return False
            return True

        value = value.strip()
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    board: str
    current_turn: Color
    status: Status
    move_history: list[str]


class BestMoveResponse(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    notation: str
    evaluation: int
    nodes_searched: int
    depth: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str
    details: str

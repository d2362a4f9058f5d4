"""
A position (square) on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.chess.pieces import Color
from src.core.exceptions import InvalidMoveError, InvalidPositionError

# Chess board is always 8x8. Files and ranks are 0-indexed: (0, 0) is a1, (7, 7) is h8
BOARD_DIMENSIONS = (8, 8)
FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True)
class Position:
    """
    NOTE: Calling the constructor directly does NOT check the bounds. That is meant for internal use, where
    the coordinates are known to be on the board. Use `Position.create()` for anything coming from outside.
    """

    file: int
    rank: int

    @classmethod
    def create(cls, file: int, rank: int) -> Position:
        """Safe constructor"""
        position = cls(file, rank)
        if not position.is_valid():
            raise InvalidPositionError(
                f"File and rank must be between 0-7, got {file},{rank}"
            )
        return position

    @classmethod
    def from_algebraic(cls, file_char: str, rank_char: str) -> Position:
        """Algebraic notation: ('a', '1') - ('h', '8') get converted to (0,0) - (7,7)"""
        is_single_chars = len(file_char) == 1 and len(rank_char) == 1
        if not (is_single_chars and file_char in FILES and rank_char in RANKS):
            raise InvalidPositionError(
                f"Invalid algebraic coordinates: {file_char}{rank_char}"
            )
        return cls(FILES.index(file_char), RANKS.index(rank_char))

    @classmethod
    def from_str(cls, square: str) -> Position:
        """'e4' -> Position(4, 3)"""
        if len(square) != 2:
            raise InvalidPositionError(
                f"Position must be 2 characters, got {square!r}"
            )
        return cls.from_algebraic(square[0], square[1])

    def to_algebraic(self) -> tuple[str, str]:
        return FILES[self.file], RANKS[self.rank]

    def __str__(self) -> str:
        return "".join(self.to_algebraic())

    def is_valid(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )

    def relative_rank(self, color: Color) -> int:
        """The rank as seen from the side of the given color (Black counts from the top of the board)"""
        return self.rank if color == Color.WHITE else BOARD_DIMENSIONS[1] - 1 - self.rank

    def offset(self, df: int, dr: int) -> Position:
        """Step along a direction. Result may well be off the board: check `is_valid()`."""
        return Position(self.file + df, self.rank + dr)


def parse_move_string(move: str) -> tuple[Position, Position]:
    """
    Accepts either "e2-e4" or "e2e4".

    Any other shape is an InvalidMoveError. A well-shaped string with a non-existing square is an InvalidPositionError.
    """
    move = move.strip()
    if "-" in move:
        parts = move.split("-")
        if len(parts) != 2:
            raise InvalidMoveError(f"Invalid move format: {move}")
        from_str, to_str = parts
    elif len(move) == 4:
        from_str, to_str = move[:2], move[2:]
    else:
        raise InvalidMoveError(f"Invalid move format: {move}")

    return Position.from_str(from_str), Position.from_str(to_str)

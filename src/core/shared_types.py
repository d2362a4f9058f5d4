"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    # NOTE: declared for completeness. None of the current rules ends a game in a draw.
    DRAW = "draw"


# --- The domain layer (src/chess/pieces.py, src/chess/game.py) has its own Enum versions of these.
# --- NOTE the string values here are what crosses the boundary (GameModel, API responses)


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

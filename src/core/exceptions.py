"""
Custom exceptions shared by all layers.

Every exception raised on purpose by the domain, service, or persistence layer derives from ChessError.
The API layer translates these into HTTP responses (see src/api/routes.py).
"""


class ChessError(Exception):
    """Top-level custom exception. Catch this one if you do not care about the specific reason."""


# --- DOMAIN ERRORS ---
class InvalidPositionError(ChessError):
    """Malformed coordinate, or an index outside of the board."""


class InvalidMoveError(ChessError):
    """No piece on the source square, unparseable move, or no moves left to choose from."""


class NotYourTurnError(InvalidMoveError):
    """The piece on the source square belongs to the player that is not to move."""


class NoLegalMovesError(InvalidMoveError):
    """The search was asked for a move, but move generation came back empty."""


class GameOverError(ChessError):
    """The game already ended (checkmate / stalemate), so no further computer moves."""


class GameStateError(ChessError):
    """A stored game could not be turned back into a valid Game."""


class InternalError(ChessError):
    """Reserved for conditions that point to a bug rather than bad input."""


# --- PERSISTENCE ERRORS ---
class RepositoryError(ChessError):
    """Something went wrong reading from / writing to the repository."""


class GameNotFoundError(RepositoryError):
    """No record stored under the requested game ID."""


# --- API ERRORS ---
class InvalidRequestError(ChessError, ValueError):
    """
    Request data did not pass validation.

    NOTE: Also a ValueError, so pydantic field validators wrap it into a ValidationError.
    """

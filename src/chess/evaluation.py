"""
Static evaluation of a board.

Score is in centipawns, seen from the perspective of one color: positive means that color is better off.
Only looks at the pieces on the board (no history, no check status, no game phase).
"""

from src.chess.board import Board
from src.chess.pieces import Color, PieceType
from src.chess.position import Position

CENTER_CONTROL_BONUS = 10
DEVELOPED_PIECE_BONUS = 15

CENTER_SQUARES: frozenset[Position] = frozenset(
    Position.from_str(square) for square in ("d4", "e4", "d5", "e5")
)
MINOR_PIECES: frozenset[PieceType] = frozenset({PieceType.KNIGHT, PieceType.BISHOP})


def evaluate_board(board: Board, color: Color) -> int:
    score = 0
    for position, piece in board.pieces():
        piece_score = piece.value

        # occupying the center
        if position in CENTER_SQUARES:
            piece_score += CENTER_CONTROL_BONUS

        # knights and bishops that left their home rank
        if piece.type in MINOR_PIECES and position.relative_rank(piece.color) > 0:
            piece_score += DEVELOPED_PIECE_BONUS

        score += piece_score if piece.color == color else -piece_score
    return score

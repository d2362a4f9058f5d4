"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the pseudo-legal move sets for each piece type.

Pseudo-legal: a move follows the movement pattern of the piece and does not land on one of your own pieces,
but it is NOT checked whether it leaves your own king under attack.
No castling, no en passant, no promotion.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Self

from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import BOARD_DIMENSIONS, Position, parse_move_string


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def get(self, position: Position) -> Optional[Piece]: ...


Vector = tuple[int, int]

STRAIGHTS: tuple[Vector, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONALS: tuple[Vector, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
KNIGHT_JUMPS: tuple[Vector, ...] = (
    (1, 2),
    (-1, 2),
    (1, -2),
    (-1, -2),
    (2, 1),
    (-2, 1),
    (2, -1),
    (-2, -1),
)

# pawns: the direction they push in, and the rank they are allowed a double step from
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}
PAWN_HOME_RANK: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: BOARD_DIMENSIONS[1] - 2}


@dataclass
class ChessMove:
    """
    basic definition of a move to be made

    NOTE: `score` is scratch space for the search. It does not take part in comparisons.
    """

    from_square: Position
    to_square: Position
    score: int = field(default=0, compare=False)

    @classmethod
    def from_str(cls, move: str) -> Self:
        """ "e2-e4" or "e2e4" """
        from_square, to_square = parse_move_string(move)
        return cls(from_square, to_square)

    def __str__(self) -> str:
        return f"{self.from_square}-{self.to_square}"


# --- MOVEMENT RULES ---
def _is_available(target: Position, color: Color, board: Board) -> bool:
    """On the board, and either empty or occupied by the opponent."""
    if not target.is_valid():
        return False
    piece = board.get(target)
    return piece is None or piece.color != color


def raycasting_move(
    position: Position, color: Color, board: Board, directions: tuple[Vector, ...]
) -> list[ChessMove]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece or
    the edge of the board. An opponent's piece can be captured (include the square, then stop),
    your own piece blocks (stop before it).
    """
    moves: list[ChessMove] = []
    for df, dr in directions:
        target = position.offset(df, dr)
        while target.is_valid():
            piece_found = board.get(target)
            if piece_found is not None:
                if piece_found.color != color:
                    moves.append(ChessMove(position, target))
                break

            moves.append(ChessMove(position, target))
            target = target.offset(df, dr)
    return moves


def single_step_move(
    position: Position, color: Color, board: Board, deltas: tuple[Vector, ...]
) -> list[ChessMove]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    moves: list[ChessMove] = []
    for df, dr in deltas:
        target = position.offset(df, dr)
        if _is_available(target, color, board):
            moves.append(ChessMove(position, target))
    return moves


def candidate_pawn_moves(position: Position, color: Color, board: Board) -> list[ChessMove]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally, and ONLY when there is an opponent's piece to take
    """
    moves: list[ChessMove] = []
    direction = PAWN_DIRECTION[color]

    # Pawn pushes : Black moves down the board, White moves up the board
    one_step = position.offset(0, direction)
    if one_step.is_valid() and board.get(one_step) is None:
        moves.append(ChessMove(position, one_step))

        two_steps = position.offset(0, 2 * direction)
        if (
            position.rank == PAWN_HOME_RANK[color]
            and two_steps.is_valid()
            and board.get(two_steps) is None
        ):
            moves.append(ChessMove(position, two_steps))

    # pawns take diagonally:
    for df in (-1, 1):
        target = position.offset(df, direction)
        piece_found = board.get(target)
        if target.is_valid() and piece_found is not None and piece_found.color != color:
            moves.append(ChessMove(position, target))
    return moves


def candidate_knight_moves(position: Position, color: Color, board: Board) -> list[ChessMove]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(position, color, board, KNIGHT_JUMPS)


def candidate_bishop_moves(position: Position, color: Color, board: Board) -> list[ChessMove]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(position, color, board, DIAGONALS)


def candidate_rook_moves(position: Position, color: Color, board: Board) -> list[ChessMove]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(position, color, board, STRAIGHTS)


def candidate_queen_moves(position: Position, color: Color, board: Board) -> list[ChessMove]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(position, color, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(position: Position, color: Color, board: Board) -> list[ChessMove]:
    """The king can move by a single square at the time. No castling."""
    return single_step_move(position, color, board, STRAIGHTS + DIAGONALS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Color, Board], list[ChessMove]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def generate_moves(board: Board, color: Color) -> list[ChessMove]:
    """
    All pseudo-legal moves for the player with the `color` pieces.

    Squares are scanned rank by rank (a1, b1, ..., h1, a2, ...), so the order of the moves is deterministic.
    """
    moves: list[ChessMove] = []
    for rank in range(BOARD_DIMENSIONS[1]):
        for file in range(BOARD_DIMENSIONS[0]):
            position = Position(file, rank)
            piece = board.get(position)
            if piece is None or piece.color != color:
                continue
            movement_rule = MOVEMENT_RULES[piece.type]
            moves.extend(movement_rule(position, color, board))
    return moves

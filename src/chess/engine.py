"""
Computer player: depth-limited negamax search with alpha-beta pruning.

Convention
----
Every score is seen from the perspective of the side to move in that node (negamax).
A child's score is negated when it is rolled up to its parent, at the root as well as inside the tree.

Every explored branch works on its own copy of the board, so an Engine never mutates the game it is searching.
"""

import logging
from typing import Protocol

from src.chess.board import Board
from src.chess.evaluation import evaluate_board
from src.chess.moves import ChessMove, generate_moves
from src.chess.pieces import Color, PieceType
from src.core.exceptions import InvalidMoveError, NoLegalMovesError

_log = logging.getLogger(__name__)

DEFAULT_SEARCH_DEPTH = 3
# Larger than any score evaluate_board() can produce
INFINITY = 10_000_000

PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


class Game(Protocol):
    """Just the parts of a game the search needs"""

    board: Board
    current_turn: Color


class Engine:
    """
    Search state of a single search. Create a fresh Engine for every search: `nodes_searched` is just a diagnostic counter.
    """

    def __init__(self, depth: int = DEFAULT_SEARCH_DEPTH) -> None:
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.depth = depth
        self.nodes_searched = 0

    def find_best_move(self, game: Game) -> ChessMove:
        """
        Best move for the side to move in `game`. The returned move carries its score.

        Ties are broken by generation order: the first move found with the highest score is kept.
        NOTE: Does not distinguish checkmate from stalemate. That is up to the caller.
        """
        color = game.current_turn
        board = game.board
        self.nodes_searched = 0

        moves = generate_moves(board, color)
        if not moves:
            raise NoLegalMovesError("No legal moves available")

        best_move: ChessMove | None = None
        best_score = -INFINITY
        alpha, beta = -INFINITY, INFINITY
        for move in moves:
            child = board.clone()
            try:
                child.relocate(move.from_square, move.to_square)
            except InvalidMoveError:
                _log.warning("Generated move %s could not be applied. Skipping it.", move)
                continue

            move.score = -self.search(child, self.depth - 1, -beta, -alpha, color.opposite)
            if move.score > best_score:
                best_score = move.score
                best_move = move
                # Only the best move's score is exact: later moves are searched with a narrower window
                alpha = max(alpha, best_score)

        if best_move is None:
            raise InvalidMoveError("No valid moves found")

        _log.debug(
            "Best move for %s: %s (score=%d, depth=%d, nodes=%d)",
            color.name.lower(),
            best_move,
            best_move.score,
            self.depth,
            self.nodes_searched,
        )
        return best_move

    def search(self, board: Board, depth: int, alpha: int, beta: int, color: Color) -> int:
        """
        Negamax with alpha-beta pruning. Returns the score of `board` from `color`'s perspective.

        No quiescence search: at depth 0 the static evaluation is returned as is.
        Without any moves (no pieces left that can move) the static evaluation is returned as well.
        """
        self.nodes_searched += 1

        if depth == 0:
            return evaluate_board(board, color)

        moves = generate_moves(board, color)
        if not moves:
            return evaluate_board(board, color)

        best_score = -INFINITY
        for move in moves:
            child = board.clone()
            child.relocate(move.from_square, move.to_square)
            score = -self.search(child, depth - 1, -beta, -alpha, color.opposite)

            best_score = max(best_score, score)
            alpha = max(alpha, score)
            if alpha >= beta:
                # the opponent will never allow this line: skip the remaining moves
                break
        return best_score

    def legal_moves(self, board: Board, color: Color) -> list[ChessMove]:
        """Pseudo-legal moves, exposed for the Game's status checks"""
        return generate_moves(board, color)

    def stats(self) -> tuple[int, int]:
        """(nodes searched, search depth)"""
        return self.nodes_searched, self.depth


def describe_move(move: ChessMove, board: Board) -> str:
    """
    Simplified algebraic notation: piece letter + target square. ex. "Nf3", "e4" (pawns have no letter)

    Must be called with the board BEFORE the move is made.
    """
    piece = board.get(move.from_square)
    if piece is None:
        return "???"
    return f"{PIECE_LETTERS[piece.type]}{move.to_square}"

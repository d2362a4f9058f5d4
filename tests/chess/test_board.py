"""Unit tests for /src/chess/board.py"""

from collections import Counter
from typing import Callable, Literal

import pytest

from src.chess.board import EMPTY_PLACEMENT, STARTING_PLACEMENT, Board
from src.chess.pieces import PIECE_TO_SYMBOL, Color, Piece, PieceType
from src.chess.position import Position
from src.core.exceptions import InvalidMoveError, InvalidPositionError

PieceColors = Literal[Color.WHITE, Color.BLACK]
BACK_RANK_ORDER = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]


@pytest.fixture
def board_with_single_piece() -> Callable[[PieceType, PieceColors, str], Board]:
    """Call the inner function that will be returned with the desired piece type, color, and square"""

    def _create_board(
        piece_type: PieceType,
        color: PieceColors,
        square_name: str = "d4",
    ) -> Board:
        board = Board.empty()
        board.set(Position.from_str(square_name), Piece(piece_type, color))
        return board

    return _create_board


def sq(square: str) -> Position:
    return Position.from_str(square)


# -- CREATION LOGIC ---
def test_new_board_in_starting_position() -> None:
    """Make sure board position is correctly initialized"""
    board = Board.new()

    for file, piece_type in enumerate(BACK_RANK_ORDER):
        assert board.get(Position(file, 0)) == Piece(piece_type, Color.WHITE)
        assert board.get(Position(file, 1)) == Piece(PieceType.PAWN, Color.WHITE)
        assert board.get(Position(file, 6)) == Piece(PieceType.PAWN, Color.BLACK)
        assert board.get(Position(file, 7)) == Piece(piece_type, Color.BLACK)

    # ranks 3 through 6 all empty
    for rank in range(2, 6):
        for file in range(8):
            assert board.get(Position(file, rank)) is None


def test_new_board_piece_count() -> None:
    """32 pieces in total, 16 for each color"""
    board = Board.new()
    pieces = [piece for _, piece in board.pieces()]
    assert len(pieces) == 32
    colors = Counter(piece.color for piece in pieces)
    assert colors[Color.WHITE] == 16
    assert colors[Color.BLACK] == 16


def test_new_board_matches_starting_placement() -> None:
    assert Board.new().to_placement() == STARTING_PLACEMENT
    assert Board.from_placement(STARTING_PLACEMENT) == Board.new()


def test_creating_board_after_e4() -> None:
    """Say, white moves the pawn from e2 to e4, and I want to load up the board in this position"""
    board = Board.from_placement("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR")
    assert board.get(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE)
    assert board.get(sq("e2")) is None
    assert board.get(sq("e8")) == Piece(PieceType.KING, Color.BLACK)
    assert len(list(board.pieces())) == 32


def test_creating_board_mid_game() -> None:
    """Create a board from a game after a bunch of random moves"""
    placement = "2kr1b1r/p1p1pppp/2p2n2/3q2B1/6Q1/2NP4/PPP2PPP/R4RK1"
    board = Board.from_placement(placement)
    assert board.get(sq("c8")) == Piece(PieceType.KING, Color.BLACK)
    assert board.get(sq("d5")) == Piece(PieceType.QUEEN, Color.BLACK)
    assert board.get(sq("g5")) == Piece(PieceType.BISHOP, Color.WHITE)
    assert board.get(sq("g1")) == Piece(PieceType.KING, Color.WHITE)
    assert board.get(sq("a8")) is None
    assert board.to_placement() == placement


@pytest.mark.parametrize(
    "placement",
    [
        "8/8/8/8/8/8/8",  # 7 ranks
        "9/8/8/8/8/8/8/8",  # too many files
        "7/8/8/8/8/8/8/8",  # too few files
        "rnbqkbnrr/8/8/8/8/8/8/8",  # piece beyond the h-file
        "x7/8/8/8/8/8/8/8",  # unknown piece
    ],
)
def test_invalid_placement(placement: str) -> None:
    with pytest.raises(InvalidPositionError):
        _ = Board.from_placement(placement)


@pytest.mark.parametrize("piece_type", list(PieceType))
@pytest.mark.parametrize("color", [Color.WHITE, Color.BLACK])
def test_single_piece_placement(
    board_with_single_piece: Callable[[PieceType, PieceColors, str], Board],
    piece_type: PieceType,
    color: PieceColors,
) -> None:
    board = board_with_single_piece(piece_type, color, "d4")
    symbol = PIECE_TO_SYMBOL[piece_type]
    symbol = symbol.upper() if color == Color.WHITE else symbol
    assert board.to_placement() == f"8/8/8/8/3{symbol}4/8/8/8"


# -- ACCESS ---
@pytest.mark.parametrize("file, rank", [(8, 0), (0, 8), (-1, 3), (100, 100)])
def test_get_is_lenient(file: int, rank: int) -> None:
    """Reading off the board is just an empty square, not an error"""
    assert Board.new().get(Position(file, rank)) is None


@pytest.mark.parametrize("file, rank", [(8, 0), (0, 8), (-1, 3)])
def test_set_is_strict(file: int, rank: int) -> None:
    board = Board.new()
    with pytest.raises(InvalidPositionError):
        board.set(Position(file, rank), Piece(PieceType.QUEEN, Color.WHITE))


def test_set_and_clear_square() -> None:
    board = Board.empty()
    queen = Piece(PieceType.QUEEN, Color.BLACK)
    board.set(sq("h5"), queen)
    assert board.get(sq("h5")) == queen
    board.set(sq("h5"), None)
    assert board.get(sq("h5")) is None


# -- RELOCATION ---
def test_relocate_twice() -> None:
    """e2 -> e4 -> e5: only the pawn on e5 remains"""
    board = Board.new()
    board.relocate(sq("e2"), sq("e4"))
    board.relocate(sq("e4"), sq("e5"))
    assert board.get(sq("e2")) is None
    assert board.get(sq("e4")) is None
    assert board.get(sq("e5")) == Piece(PieceType.PAWN, Color.WHITE)


def test_relocate_captures_by_overwriting() -> None:
    """No legality checks: the white queen simply replaces the black queen"""
    board = Board.new()
    board.relocate(sq("d1"), sq("d8"))
    assert board.get(sq("d1")) is None
    assert board.get(sq("d8")) == Piece(PieceType.QUEEN, Color.WHITE)
    assert len(list(board.pieces())) == 31


def test_relocate_from_empty_square() -> None:
    board = Board.new()
    before = board.to_placement()
    with pytest.raises(InvalidMoveError):
        board.relocate(sq("e4"), sq("e5"))
    assert board.to_placement() == before


def test_relocate_off_the_board_leaves_board_untouched() -> None:
    """Failing relocation should not clear the source square"""
    board = Board.new()
    with pytest.raises(InvalidPositionError):
        board.relocate(sq("e2"), Position(4, 8))
    assert board.get(sq("e2")) == Piece(PieceType.PAWN, Color.WHITE)

    with pytest.raises(InvalidPositionError):
        board.relocate(Position(-1, 0), sq("e4"))
    assert board.to_placement() == STARTING_PLACEMENT


# -- HELPERS ---
def test_pieces_in_scan_order() -> None:
    positions = [position for position, _ in Board.new().pieces()]
    assert positions[0] == sq("a1")
    assert positions[8] == sq("a2")
    assert positions[-1] == sq("h8")


def test_locate_king() -> None:
    board = Board.new()
    assert board.locate_king(Color.WHITE) == sq("e1")
    assert board.locate_king(Color.BLACK) == sq("e8")
    assert Board.from_placement(EMPTY_PLACEMENT).locate_king(Color.WHITE) is None


def test_clone_is_independent() -> None:
    board = Board.new()
    clone = board.clone()
    clone.relocate(sq("g1"), sq("f3"))
    assert board.get(sq("g1")) == Piece(PieceType.KNIGHT, Color.WHITE)
    assert board.get(sq("f3")) is None
    assert clone != board


def test_render() -> None:
    lines = Board.new().render().split("\n")
    assert len(lines) == 9
    assert lines[0] == "8  r n b q k b n r"
    assert lines[1] == "7  p p p p p p p p"
    assert lines[4] == "4  . . . . . . . ."
    assert lines[7] == "1  R N B Q K B N R"
    assert lines[8] == "   a b c d e f g h"
    assert str(Board.new()) == Board.new().render()

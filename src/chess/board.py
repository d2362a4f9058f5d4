"""The Game board: owns the placement of all pieces. Knows nothing about turns, checks, or legality."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import BOARD_DIMENSIONS, FILES, Position
from src.core.exceptions import InvalidMoveError, InvalidPositionError

Grid = list[list[Optional[Piece]]]

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_PLACEMENT = "/".join(["8"] * BOARD_DIMENSIONS[1])

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _empty_grid() -> Grid:
    return [[None] * BOARD_DIMENSIONS[0] for _ in range(BOARD_DIMENSIONS[1])]


@dataclass
class Board:
    # indexed as squares[rank][file]
    squares: Grid = field(default_factory=_empty_grid)

    @classmethod
    def new(cls) -> Board:
        """Board in the standard starting position"""
        board = cls()
        board._setup_initial_position()
        return board

    @classmethod
    def empty(cls) -> Board:
        return cls()

    def _setup_initial_position(self) -> None:
        last_rank = BOARD_DIMENSIONS[1] - 1
        for file in range(BOARD_DIMENSIONS[0]):
            self.squares[1][file] = Piece(PieceType.PAWN, Color.WHITE)
            self.squares[last_rank - 1][file] = Piece(PieceType.PAWN, Color.BLACK)
        self._setup_back_rank(0, Color.WHITE)
        self._setup_back_rank(last_rank, Color.BLACK)

    def _setup_back_rank(self, rank: int, color: Color) -> None:
        for file, piece_type in enumerate(BACK_RANK):
            self.squares[rank][file] = Piece(piece_type, color)

    @classmethod
    def from_placement(cls, placement: str) -> Board:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        ranks = placement.split("/")
        if len(ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidPositionError(
                f"Placement must describe {BOARD_DIMENSIONS[1]} ranks, got {len(ranks)}: {placement!r}"
            )

        board = cls()
        for rank_idx, one_rank in enumerate(ranks):
            # read from top rank (8th) to bottom rank (1st) ...
            rank = BOARD_DIMENSIONS[1] - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in one_rank:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                    continue
                if file >= BOARD_DIMENSIONS[0]:
                    raise InvalidPositionError(
                        f"Rank {rank + 1} describes more than {BOARD_DIMENSIONS[0]} files: {one_rank!r}"
                    )
                try:
                    board.squares[rank][file] = Piece.from_symbol(character)
                except KeyError as exc:
                    raise InvalidPositionError(
                        f"Unknown piece symbol {character!r} in {placement!r}"
                    ) from exc
                file += 1
            if file != BOARD_DIMENSIONS[0]:
                raise InvalidPositionError(
                    f"Rank {rank + 1} does not describe {BOARD_DIMENSIONS[0]} files: {one_rank!r}"
                )
        return board

    def to_placement(self) -> str:
        """Ranks are separated by slashes."""
        return "/".join(
            self._rank_to_placement(rank)
            for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_placement(self, rank: int) -> str:
        characters: list[str] = []
        empty_count = 0
        for piece in self.squares[rank]:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                characters.append(str(empty_count))
                empty_count = 0
            characters.append(piece.symbol)

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            characters.append(str(empty_count))
        return "".join(characters)

    # --- ACCESS ---
    def get(self, position: Position) -> Optional[Piece]:
        """Lenient read: anything off the board is just an empty square."""
        if not position.is_valid():
            return None
        return self.squares[position.rank][position.file]

    def set(self, position: Position, piece: Optional[Piece]) -> None:
        """Strict write"""
        if not position.is_valid():
            raise InvalidPositionError(f"Invalid position: {position!r}")
        self.squares[position.rank][position.file] = piece

    def relocate(self, from_position: Position, to_position: Position) -> None:
        """
        Move whatever stands on `from_position` to `to_position`. Anything standing on the target square is simply overwritten (captured).

        NOTE: No legality checks whatsoever. Both squares are validated before anything is written.
        """
        if not from_position.is_valid():
            raise InvalidPositionError(f"Invalid from position: {from_position!r}")
        if not to_position.is_valid():
            raise InvalidPositionError(f"Invalid to position: {to_position!r}")

        piece = self.get(from_position)
        if piece is None:
            raise InvalidMoveError(f"No piece at position {from_position}")

        self.set(from_position, None)
        self.set(to_position, piece)

    def pieces(self) -> Iterator[tuple[Position, Piece]]:
        """All occupied squares, in scan order (a1, b1, ... h1, a2, ... h8)"""
        for rank, row in enumerate(self.squares):
            for file, piece in enumerate(row):
                if piece is not None:
                    yield Position(file, rank), piece

    def locate_king(self, color: Color) -> Optional[Position]:
        king = Piece(PieceType.KING, color)
        return next(
            (position for position, piece in self.pieces() if piece == king), None
        )

    def clone(self) -> Board:
        # Pieces are immutable, so copying the rows is enough
        return Board([list(row) for row in self.squares])

    # --- DEBUGGING ---
    def render(self) -> str:
        """
        8  r n b q k b n r
        7  p p p p p p p p
        ...
           a b c d e f g h
        """
        lines: list[str] = []
        for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1):
            symbols = " ".join(
                piece.symbol if piece else "." for piece in self.squares[rank]
            )
            lines.append(f"{rank + 1}  {symbols}")
        lines.append("   " + " ".join(FILES))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

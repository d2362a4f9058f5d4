"""
Terminal front-end, no HTTP involved.

    python -m src.cli play            # you play White, the engine plays Black
    python -m src.cli demo --depth 2  # engine output from the starting position
"""

import argparse
import logging
from typing import Callable, Optional, Sequence

from src.chess.board import Board
from src.chess.engine import Engine, describe_move
from src.chess.game import Game, Status
from src.chess.moves import generate_moves
from src.chess.pieces import Color
from src.chess.position import parse_move_string
from src.core.config import SETTINGS
from src.core.exceptions import ChessError, InvalidMoveError
from src.core.logging import configure_logging

_log = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

QUIT_COMMANDS = frozenset({"quit", "exit"})


def play_game(
    depth: int,
    human_color: Color = Color.WHITE,
    input_fn: InputFn = input,
    output: OutputFn = print,
) -> Game:
    """
    Interactive game loop: the human enters moves as "e2-e4" or "e2e4", the engine answers.
    Returns the game as it stood when the loop ended (game over, quit, or engine out of moves).
    """
    game = Game.new_game()
    output(game.board.render())

    while True:
        side = game.current_turn.name.capitalize()
        output(f"\n{side}'s turn")

        if game.current_turn == human_color:
            text = input_fn("Enter your move (e.g. 'e2-e4') or 'quit' to exit: ").strip()
            if text.lower() in QUIT_COMMANDS:
                break
            try:
                from_position, to_position = parse_move_string(text)
                game.make_move(str(from_position), str(to_position))
            except ChessError as exc:
                output(f"Invalid move: {exc}")
                continue
            output(f"Move made: {from_position}-{to_position}")
        else:
            output("Engine is thinking...")
            try:
                best_move, engine = game.best_move(depth)
            except InvalidMoveError as exc:
                output(f"Engine error: {exc}")
                break
            nodes, engine_depth = engine.stats()
            notation = describe_move(best_move, game.board)
            game.make_move(str(best_move.from_square), str(best_move.to_square))
            output(
                f"Engine's move: {best_move} ({notation}, score: {best_move.score}, nodes: {nodes}, depth: {engine_depth})"
            )

        output(game.board.render())

        if game.status == Status.CHECKMATE:
            winner = game.winner
            assert winner is not None
            output(f"Checkmate! {winner.name.capitalize()} wins.")
            break
        if game.status == Status.STALEMATE:
            output("Stalemate! The game is a draw.")
            break
        if game.status == Status.CHECK:
            output(f"{game.current_turn.name.capitalize()} is in check!")

    return game


def demo(depth: int, output: OutputFn = print) -> None:
    """Move generation + search from the starting position, and after 1. e4"""
    board = Board.new()
    output("Initial board:")
    output(board.render())

    output("\nMoves for White:")
    for move in generate_moves(board, Color.WHITE):
        output(f"  {move}")

    game = Game.new_game()
    game.make_move("e2", "e4")
    output("\nBoard after e2-e4:")
    output(game.board.render())

    output("\nFinding best move for Black...")
    engine = Engine(depth)
    best_move = engine.find_best_move(game)
    nodes, _ = engine.stats()
    output(f"Best move found: {best_move} (score: {best_move.score}, nodes: {nodes})")


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="chess-engine", description=__doc__)
    ap.add_argument("--log-level", default=SETTINGS.log_level, help="Python logging level (e.g., INFO, DEBUG)")
    subparsers = ap.add_subparsers(dest="command", required=True)

    play_parser = subparsers.add_parser("play", help="Play against the engine")
    play_parser.add_argument("--depth", type=int, default=SETTINGS.search_depth, help="Engine search depth")
    play_parser.add_argument("--color", choices=["white", "black"], default="white", help="Which side you play")

    demo_parser = subparsers.add_parser("demo", help="Show move generation and a search")
    demo_parser.add_argument("--depth", type=int, default=SETTINGS.search_depth, help="Engine search depth")

    args = ap.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "play":
        _log.info("Starting game: human=%s depth=%d", args.color, args.depth)
        play_game(args.depth, human_color=Color[args.color.upper()])
    else:
        demo(args.depth)


if __name__ == "__main__":
    main()

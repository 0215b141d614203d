"""CLI utility for single-position puzzle classification.

Usage:
    python -m puzzlecraft.cli <fen> [best_move] [--pv UCI ...]
        [--eval-before CP] [--eval-after CP] [--ply N]
        [--stockfish PATH [--depth N] [--played UCI]] [--verbose]

With --stockfish the engine supplies any eval, best move or PV not given
on the command line; --played evaluates the position after the player's
move to get --eval-after. Prints JSON with the classification and the
forced line.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import chess

from puzzlecraft.classifier import analyze_pv, classify_puzzle
from puzzlecraft.engine import EngineAnalysis
from puzzlecraft.moves import parse_board, parse_move
from puzzlecraft.types import ClassificationContext, Position


async def _evaluate(args: argparse.Namespace, board: chess.Board) -> None:
    """Fill missing engine data on args from a local UCI engine."""
    async with EngineAnalysis(args.stockfish) as engine:
        before = await engine.evaluate(board.fen(), depth=args.depth)
        if args.eval_before is None:
            args.eval_before = before.centipawns
        if args.best_move is None:
            args.best_move = before.best_move
        if not args.pv:
            args.pv = before.pv
        if args.played and args.eval_after is None:
            played = parse_move(board, args.played)
            if played is None:
                print(f"error: {args.played} is not legal in this position", file=sys.stderr)
                sys.exit(1)
            after_board = board.copy()
            after_board.push(played)
            after = await engine.evaluate(after_board.fen(), depth=args.depth)
            args.eval_after = after.centipawns


def _run(args: argparse.Namespace) -> dict:
    board = parse_board(args.fen)
    if board is None:
        print(f"error: invalid FEN or impossible position: {args.fen}", file=sys.stderr)
        sys.exit(1)

    if args.stockfish:
        asyncio.run(_evaluate(args, board))

    pv = list(args.pv or [])
    if args.best_move and not pv:
        pv = [args.best_move]

    position = Position(
        fen=board.fen(),
        eval_cp=args.eval_before,
        best_move=args.best_move,
        pv=tuple(pv),
        ply=args.ply,
    )
    ctx = ClassificationContext(
        position=position,
        eval_before_cp=args.eval_before,
        eval_after_cp=args.eval_after,
        side_to_move=board.turn,
    )
    classification = classify_puzzle(ctx)
    forced = analyze_pv(position.fen, pv, args.eval_before)
    return {
        "fen": position.fen,
        "best_move": args.best_move,
        "classification": classification.to_dict(),
        "pv": forced.to_dict(),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Classify a chess position as a training puzzle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("fen", help="Position FEN (quote the full string)")
    parser.add_argument("best_move", nargs="?", default=None, help="Best move in UCI notation")
    parser.add_argument("--pv", nargs="*", default=[], metavar="UCI", help="Principal variation, UCI moves")
    parser.add_argument("--eval-before", type=int, default=None, metavar="CP",
                        help="Eval of the position, White perspective (mate = +/-10000)")
    parser.add_argument("--eval-after", type=int, default=None, metavar="CP",
                        help="Eval after the move actually played, White perspective")
    parser.add_argument("--ply", type=int, default=None, help="Half-move index from game start")
    parser.add_argument("--stockfish", default=None, metavar="PATH",
                        help="Evaluate missing data with this UCI engine")
    parser.add_argument("--depth", type=int, default=18, help="Engine search depth (default: 18)")
    parser.add_argument("--played", default=None, metavar="UCI",
                        help="Move actually played; with --stockfish, evaluated for --eval-after")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    result = _run(args)
    json.dump(result, sys.stdout, indent=2)
    print()


if __name__ == "__main__":
    main()

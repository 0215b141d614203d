"""Multi-target attack motifs: fork, double attack, trapped piece."""

import chess

from puzzlecraft.analysis.geometry import control_mask
from puzzlecraft.analysis.safety import is_trapped
from puzzlecraft.analysis.threats import null_move_board, winning_captures
from puzzlecraft.motifs.context import MotifContext, value_of


def detect_fork(ctx: MotifContext) -> bool:
    """The moved piece hits two or more pieces (check counts as one) and material follows."""
    to_sq = ctx.move.to_square
    attacked = control_mask(ctx.after, to_sq) & ctx.after.occupied_co[ctx.opponent]
    targets = [
        sq for sq in chess.SquareSet(attacked)
        if ctx.after.piece_type_at(sq) not in (chess.PAWN, chess.KING)
    ]
    total = len(targets) + (1 if to_sq in ctx.after.checkers() else 0)
    if total < 2:
        return False
    return ctx.material_gained(3)


def detect_double_attack(ctx: MotifContext) -> bool:
    """Two new winning captures from two different pieces, confirmed by the PV."""
    before = {(t.source, t.target) for t in winning_captures(ctx.board, ctx.mover)}
    fresh = [
        t for t in winning_captures(ctx.after, ctx.mover)
        if (t.source, t.target) not in before
    ]
    if len(fresh) < 2 or len({t.source for t in fresh}) < 2:
        return False
    return ctx.material_gained(3)


def _trapped_squares(board: chess.Board, color: chess.Color) -> set[chess.Square]:
    probe = board if board.turn == color else null_move_board(board, color)
    return {
        sq for sq in chess.SquareSet(probe.occupied_co[color])
        if value_of(probe.piece_type_at(sq)) >= 3 and is_trapped(probe, sq)
    }


def detect_trapped_piece(ctx: MotifContext) -> bool:
    """A valuable enemy piece is left with no safe square, and the mover cashes in."""
    fresh = _trapped_squares(ctx.after, ctx.opponent) - _trapped_squares(ctx.board, ctx.opponent)
    if not fresh:
        return False
    if len(ctx.line) < 3:
        return True
    return ctx.material_gained_in_line()

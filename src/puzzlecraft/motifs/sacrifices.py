"""Material-giving and tempo motifs: sacrifice, desperado, attraction, intermezzo.

All of these need the PV: a piece left en prise is only a sacrifice if the
opponent really takes it.
"""

import chess

from puzzlecraft.analysis.geometry import is_attacked
from puzzlecraft.analysis.safety import is_in_bad_spot
from puzzlecraft.motifs.context import MotifContext, value_of


def _is_recaptured(ctx: MotifContext) -> bool:
    reply = ctx.ply(1)
    return reply is not None and reply.to_square == ctx.move.to_square


def _gives_up(ctx: MotifContext) -> int:
    """Pawn units the moved piece is worth beyond what it captured."""
    return value_of(ctx.moved_piece.piece_type) - value_of(ctx.captured)


def is_sacrifice(ctx: MotifContext) -> bool:
    """Minor piece or more, worth clearly more than what it took, and taken back."""
    piece = ctx.moved_piece
    if piece.piece_type == chess.KING or value_of(piece.piece_type) < 3:
        return False
    return _gives_up(ctx) > 1 and _is_recaptured(ctx)


def detect_sacrifice(ctx: MotifContext) -> bool:
    return not ctx.defending and is_sacrifice(ctx)


def detect_defensive_sacrifice(ctx: MotifContext) -> bool:
    return ctx.defending and is_sacrifice(ctx)


def detect_desperado(ctx: MotifContext) -> bool:
    """A piece that is lost anyway grabs something on its way out."""
    if not ctx.is_capture or ctx.moved_piece.piece_type == chess.KING:
        return False
    if not is_in_bad_spot(ctx.board, ctx.move.from_square):
        return False
    if ctx.ply(1) is None:
        return is_attacked(ctx.after, ctx.move.to_square)
    return _is_recaptured(ctx)


def detect_attraction(ctx: MotifContext) -> bool:
    """Lure the king or queen onto a square where the follow-up hits it."""
    if _gives_up(ctx) <= 0 or ctx.moved_piece.piece_type == chess.KING:
        return False
    if not _is_recaptured(ctx):
        return False
    reply = ctx.ply(1)
    if ctx.board_before(1).piece_type_at(reply.from_square) not in (chess.KING, chess.QUEEN):
        return False
    follow_up = ctx.ply(2)
    if follow_up is None:
        return False
    return ctx.board_after(2).is_check() or ctx.captured_at(2) is not None


def detect_intermezzo(ctx: MotifContext) -> bool:
    """A check played instead of an available capture, with the capture coming after."""
    if ctx.is_capture or not ctx.gives_check:
        return False
    other_capture = any(
        ctx.board.is_capture(m) for m in ctx.board.legal_moves if m != ctx.move
    )
    if not other_capture:
        return False
    return ctx.ply(2) is not None and ctx.captured_at(2) is not None

"""Mating-net and drawing-resource motifs found by replaying the PV."""

import chess
from chess import KNIGHT, square_distance, square_rank

from puzzlecraft.analysis.threats import has_mate_in_one
from puzzlecraft.motifs.context import MotifContext


def _mate_board(ctx: MotifContext) -> chess.Board | None:
    """First position in the line where the opponent is checkmated."""
    if "mate_board" not in ctx._cache:
        found = None
        for _, board in ctx.line:
            if board.is_checkmate() and board.turn == ctx.opponent:
                found = board
                break
        ctx._cache["mate_board"] = found
    return ctx._cache["mate_board"]


def detect_checkmate(ctx: MotifContext) -> bool:
    return _mate_board(ctx) is not None


def detect_back_rank(ctx: MotifContext) -> bool:
    """Mate of a king on its own back rank, delivered along that rank."""
    board = _mate_board(ctx)
    if board is None:
        return False
    loser = board.turn
    king = board.king(loser)
    back_rank = 0 if loser == chess.WHITE else 7
    if king is None or square_rank(king) != back_rank:
        return False
    return any(square_rank(c) == back_rank for c in board.checkers())


def detect_smothered_mate(ctx: MotifContext) -> bool:
    """Knight mate where every square next to the king holds one of its own pieces."""
    board = _mate_board(ctx)
    if board is None:
        return False
    loser = board.turn
    king = board.king(loser)
    checkers = board.checkers()
    if king is None or not checkers:
        return False
    if any(board.piece_type_at(sq) != KNIGHT for sq in checkers):
        return False
    for sq in chess.SQUARES:
        if square_distance(sq, king) == 1:
            blocker = board.piece_at(sq)
            if blocker is None or blocker.color != loser:
                return False
    return True


def detect_mate_threat(ctx: MotifContext) -> bool:
    """The best move leaves the opponent few replies, nearly all allowing mate in one.

    Only reported when the line itself doesn't already end in mate.
    """
    if _mate_board(ctx) is not None:
        return False
    after = ctx.after
    if after.is_game_over(claim_draw=False):
        return False
    replies = list(after.legal_moves)
    if not 0 < len(replies) <= ctx.settings.mate_threat_max_replies:
        return False
    probe = after.copy(stack=False)
    mating = 0
    for reply in replies:
        probe.push(reply)
        if has_mate_in_one(probe):
            mating += 1
        probe.pop()
    return mating >= max(1, len(replies) - 1)


def detect_stalemate(ctx: MotifContext) -> bool:
    return any(board.is_stalemate() for _, board in ctx.line)


def _position_key(board: chess.Board) -> tuple:
    return board.board_fen(), board.turn, board.castling_rights, board.ep_square


def detect_perpetual_check(ctx: MotifContext) -> bool:
    """Three or more checks in a row by the mover, with a position repeating."""
    mover_boards = [board for i, (_, board) in enumerate(ctx.line) if i % 2 == 0]
    if len(mover_boards) < 3:
        return False
    if not all(board.is_check() for board in mover_boards):
        return False
    if any(board.is_checkmate() for board in mover_boards):
        return False
    seen = {_position_key(ctx.board)}
    for _, board in ctx.line:
        key = _position_key(board)
        if key in seen:
            return True
        seen.add(key)
    return False

"""Defender motifs: removing, overloading and deflecting a guard."""

import chess

from puzzlecraft.analysis.geometry import control_mask, controls, defenders_of
from puzzlecraft.motifs.context import MotifContext


def _can_defend(board: chess.Board, defender_sq: int, target_sq: int, color: chess.Color) -> bool:
    """Can a defender actually recapture on target_sq if needed?

    An absolutely-pinned piece still controls squares off its pin ray,
    but can't recapture there.
    """
    if not board.is_pinned(color, defender_sq):
        return True
    return target_sq in board.pin(color, defender_sq)


def _is_sole_defender(
    board: chess.Board, color: chess.Color, defender_sq: int, target_sq: int,
) -> bool:
    """Return True if defender_sq is the only piece of color defending target_sq."""
    others = defenders_of(board, target_sq, color)
    others.discard(defender_sq)
    return not others


def _duties(board: chess.Board, sq: chess.Square, color: chess.Color) -> list[chess.Square]:
    """Attacked friendly pieces that the piece on sq alone defends."""
    enemy = not color
    duties = []
    for defended_sq in chess.SquareSet(control_mask(board, sq) & board.occupied_co[color]):
        if board.piece_type_at(defended_sq) == chess.KING:
            continue
        if not defenders_of(board, defended_sq, enemy):
            continue
        if _is_sole_defender(board, color, sq, defended_sq) and _can_defend(board, sq, defended_sq, color):
            duties.append(defended_sq)
    return duties


def overloaded_pieces(board: chess.Board, color: chess.Color) -> dict[chess.Square, list[chess.Square]]:
    """color's non-pawn, non-king pieces that are sole defender of two or more attacked pieces."""
    result = {}
    for sq in chess.SquareSet(board.occupied_co[color]):
        if board.piece_type_at(sq) in (chess.PAWN, chess.KING):
            continue
        duties = _duties(board, sq, color)
        if len(duties) >= 2:
            result[sq] = duties
    return result


def detect_removal_of_defender(ctx: MotifContext) -> bool:
    """Capture a guard, then take what it was guarding."""
    if not ctx.is_capture:
        return False
    follow_up = ctx.ply(2)
    if follow_up is None or ctx.captured_at(2) is None:
        return False
    charge = follow_up.to_square
    if charge == ctx.move.to_square:
        return False
    charge_piece = ctx.board.piece_at(charge)
    if charge_piece is None or charge_piece.color != ctx.opponent:
        return False
    return controls(ctx.board, ctx.move.to_square, charge)


def detect_overload(ctx: MotifContext) -> bool:
    """An enemy piece ends up sole defender of two attacked pieces and the mover profits."""
    before = overloaded_pieces(ctx.board, ctx.opponent)
    after = overloaded_pieces(ctx.after, ctx.opponent)
    to_sq = ctx.move.to_square
    hit = False
    for sq, duties in after.items():
        if sq not in before or any(controls(ctx.after, to_sq, d) for d in duties):
            hit = True
            break
    if not hit:
        return False
    if len(ctx.line) < 3:
        return True
    return ctx.material_gained_in_line()


def detect_deflection(ctx: MotifContext) -> bool:
    """The reply drags a defender off its post and the mover takes the abandoned piece."""
    reply = ctx.ply(1)
    follow_up = ctx.ply(2)
    if reply is None or follow_up is None or ctx.captured_at(2) is None:
        return False
    charge = follow_up.to_square
    guard_from = reply.from_square
    if charge in (guard_from, reply.to_square):
        return False
    charge_piece = ctx.board.piece_at(charge)
    if charge_piece is None or charge_piece.color != ctx.opponent:
        return False
    if not controls(ctx.board, guard_from, charge):
        return False
    return not controls(ctx.board_after(1), reply.to_square, charge)

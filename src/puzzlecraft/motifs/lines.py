"""Line motifs: pins, skewers, x-rays, discoveries, clearance and interference.

Each detector compares the ray picture before and after the best move,
so a pattern that was already on the board doesn't count as played.
"""

import chess

from puzzlecraft.analysis.geometry import controls, defenders_of, line_through
from puzzlecraft.analysis.rays import absolute_pins, find_ray_motifs
from puzzlecraft.analysis.see import see
from puzzlecraft.motifs.context import MotifContext, value_of

_SLIDERS = (chess.BISHOP, chess.ROOK, chess.QUEEN)


def detect_pin(ctx: MotifContext) -> bool:
    """The move creates, reinforces or exploits an absolute pin."""
    before = absolute_pins(ctx.board, ctx.mover)
    after = absolute_pins(ctx.after, ctx.mover)
    before_keys = {(p.pinner, p.pinned) for p in before}
    to_sq = ctx.move.to_square

    for pin in after:
        # Created: the pin didn't exist until this move
        if (pin.pinner, pin.pinned) not in before_keys:
            return True
        # Reinforced: the moved piece piles up on the pinned piece
        if pin.pinner != to_sq and controls(ctx.after, to_sq, pin.pinned):
            return True

    if not ctx.is_capture:
        return False
    for pin in before:
        if pin.pinned == to_sq:
            return True
        # Exploited: the pinned piece guards the square but can't leave its line
        if controls(ctx.board, pin.pinned, to_sq):
            pin_mask = ctx.board.pin(ctx.opponent, pin.pinned)
            if not pin_mask & chess.BB_SQUARES[to_sq]:
                return True
    return False


def detect_skewer(ctx: MotifContext) -> bool:
    """A new skewer whose rear piece the PV actually collects."""
    before = {(s.attacker, s.front, s.behind) for s in find_ray_motifs(ctx.board, ctx.mover).skewers}
    fresh = [
        s for s in find_ray_motifs(ctx.after, ctx.mover).skewers
        if (s.attacker, s.front, s.behind) not in before
    ]
    if not fresh:
        return False
    follow_up = ctx.ply(2)
    if follow_up is None:
        return True
    return any(follow_up.to_square == s.behind for s in fresh)


def detect_x_ray(ctx: MotifContext) -> bool:
    """The move lines up two sliders on a valuable target, and the line is used."""
    before = {(b.rear, b.front, b.target) for b in find_ray_motifs(ctx.board, ctx.mover).batteries}
    later_targets = {
        move.to_square for i, (move, _) in enumerate(ctx.line) if i >= 2 and i % 2 == 0
    }
    for battery in find_ray_motifs(ctx.after, ctx.mover).batteries:
        if (battery.rear, battery.front, battery.target) in before:
            continue
        target = ctx.after.piece_type_at(battery.target)
        if target == chess.KING:
            if battery.front in ctx.after.checkers():
                return True
        elif value_of(target) >= 3 and battery.target in later_targets:
            return True
    return False


def detect_discovered_attack(ctx: MotifContext) -> bool:
    """Moving one piece opens a line for another onto the king or a valuable piece."""
    from_sq = ctx.move.from_square
    to_sq = ctx.move.to_square
    if ctx.board.is_castling(ctx.move):
        return False
    if any(sq != to_sq for sq in ctx.after.checkers()):
        return True

    for slider_sq in chess.SquareSet(ctx.after.occupied_co[ctx.mover]):
        if slider_sq == to_sq or ctx.after.piece_type_at(slider_sq) not in _SLIDERS:
            continue
        for target_sq in chess.SquareSet(ctx.after.occupied_co[ctx.opponent]):
            if value_of(ctx.after.piece_type_at(target_sq)) < 3:
                continue
            if from_sq not in line_through(slider_sq, target_sq):
                continue
            if controls(ctx.board, slider_sq, target_sq):
                continue
            if controls(ctx.after, slider_sq, target_sq) and see(ctx.after, slider_sq, target_sq) > 0:
                return True
    return False


def detect_clearance(ctx: MotifContext) -> bool:
    """The moved piece vacates a line that another slider uses two plies later."""
    follow_up = ctx.ply(2)
    before_follow_up = ctx.board_before(2)
    if follow_up is None or before_follow_up is None:
        return False
    if follow_up.from_square == ctx.move.to_square:
        return False
    if before_follow_up.piece_type_at(follow_up.from_square) not in _SLIDERS:
        return False
    if ctx.move.from_square not in line_through(follow_up.from_square, follow_up.to_square):
        return False
    forcing = (ctx.captured_at(2) is not None) or ctx.board_after(2).is_check()
    return forcing


def detect_interference(ctx: MotifContext) -> bool:
    """The move lands between an enemy slider and the piece it was guarding."""
    to_sq = ctx.move.to_square
    for guard_sq in chess.SquareSet(ctx.board.occupied_co[ctx.opponent]):
        if ctx.board.piece_type_at(guard_sq) not in _SLIDERS or guard_sq == to_sq:
            continue
        for ward_sq in chess.SquareSet(ctx.board.occupied_co[ctx.opponent]):
            if ward_sq in (guard_sq, to_sq) or ctx.board.piece_type_at(ward_sq) == chess.KING:
                continue
            if to_sq not in line_through(guard_sq, ward_sq):
                continue
            if not controls(ctx.board, guard_sq, ward_sq):
                continue
            if controls(ctx.after, guard_sq, ward_sq):
                continue
            for attacker_sq in defenders_of(ctx.after, ward_sq, ctx.mover):
                if see(ctx.after, attacker_sq, ward_sq) > 0:
                    return True
    return False

"""Static Exchange Evaluation (SEE): estimates material outcome of capture chains."""

import chess

from puzzlecraft.analysis.constants import see_value
from puzzlecraft.analysis.geometry import controls, defenders_of

# Longer recapture chains than this can't occur with 32 pieces on the board
MAX_EXCHANGE_STEPS = 32


def _can_capture_on(
    board: chess.Board, attacker_sq: chess.Square, target_sq: chess.Square, color: chess.Color
) -> bool:
    """Check if piece on attacker_sq can actually capture on target_sq.

    Returns False if the piece is pinned to its king and the target
    is not on the pin ray, or if it is the king and the other side
    still controls the target.
    """
    piece = board.piece_at(attacker_sq)
    if piece is None:
        return False
    if piece.piece_type == chess.KING:
        return not defenders_of(board, target_sq, not color)
    if not board.is_pinned(color, attacker_sq):
        return True
    pin_mask = board.pin(color, attacker_sq)
    return bool(pin_mask & chess.BB_SQUARES[target_sq])


def _least_valuable_attacker(
    board: chess.Board, target: chess.Square, color: chess.Color
) -> chess.Square | None:
    """Cheapest color piece that controls target and may legally take there."""
    best: tuple[int, chess.Square] | None = None
    for sq in defenders_of(board, target, color):
        if not _can_capture_on(board, sq, target, color):
            continue
        val = see_value(board.piece_type_at(sq))
        if best is None or val < best[0]:
            best = (val, sq)
    return best[1] if best else None


def _move_onto(board: chess.Board, from_sq: chess.Square, to_sq: chess.Square) -> None:
    piece = board.remove_piece_at(from_sq)
    board.remove_piece_at(to_sq)
    board.set_piece_at(to_sq, piece)


def see(board: chess.Board, from_square: chess.Square, to_square: chess.Square) -> int:
    """Net centipawns won by the piece on from_square capturing on to_square.

    The initial capture is made, then both sides alternately recapture with
    their least valuable piece that controls the square. Sliders hidden
    behind departed pieces join in as the line opens. The gain list is
    reduced from the end with ``value[i] = max(0, gain[i] - value[i+1])``
    so either side may decline to continue. Always >= 0.

    Returns 0 when either square is empty, both pieces share a color, or
    the mover's piece cannot take on to_square (out of reach, pinned off
    the line, or a king stepping into a defended square).
    """
    if from_square not in chess.SQUARES or to_square not in chess.SQUARES:
        return 0
    attacker = board.piece_at(from_square)
    victim = board.piece_at(to_square)
    if attacker is None or victim is None or attacker.color == victim.color:
        return 0
    if not controls(board, from_square, to_square):
        return 0
    if not _can_capture_on(board, from_square, to_square, attacker.color):
        return 0

    sim = board.copy(stack=False)
    gains = [see_value(victim.piece_type)]
    on_square = attacker.piece_type
    _move_onto(sim, from_square, to_square)
    side = not attacker.color

    for _ in range(MAX_EXCHANGE_STEPS):
        next_sq = _least_valuable_attacker(sim, to_square, side)
        if next_sq is None:
            break
        gains.append(see_value(on_square))
        on_square = sim.piece_type_at(next_sq)
        _move_onto(sim, next_sq, to_square)
        side = not side

    value = 0
    for gain in reversed(gains):
        value = max(0, gain - value)
    return value

"""Square safety: is a piece defended, hanging, en prise to a cheaper piece, trapped?

The helpers follow the lichess puzzle tagger's vocabulary (a piece in a
"bad spot" is attacked and either undefended or attackable by a cheaper
piece) but answer defence questions through the color-blind geometry so
a piece defended by its own side is always seen.
"""

import chess

from puzzlecraft.analysis.constants import get_piece_value
from puzzlecraft.analysis.geometry import attackers_after_removal, defenders_of

_SLIDERS = (chess.QUEEN, chess.ROOK, chess.BISHOP)


def is_defended(board: chess.Board, square: chess.Square) -> bool:
    """Is the piece on square protected, counting defence through an attacking slider?"""
    piece = board.piece_at(square)
    if piece is None:
        return False
    if defenders_of(board, square, piece.color):
        return True
    # A friendly slider behind an enemy slider defends once the enemy captures
    for attacker in defenders_of(board, square, not piece.color):
        if board.piece_type_at(attacker) in _SLIDERS:
            if attackers_after_removal(board, square, piece.color, [attacker]):
                return True
    return False


def is_hanging(board: chess.Board, square: chess.Square) -> bool:
    return not is_defended(board, square)


def can_be_taken_by_lower_piece(board: chess.Board, square: chess.Square) -> bool:
    piece = board.piece_at(square)
    if piece is None or piece.piece_type == chess.KING:
        return False
    value = get_piece_value(piece.piece_type, king=0)
    for attacker_sq in defenders_of(board, square, not piece.color):
        attacker = board.piece_type_at(attacker_sq)
        if attacker != chess.KING and get_piece_value(attacker, king=0) < value:
            return True
    return False


def is_in_bad_spot(board: chess.Board, square: chess.Square) -> bool:
    """Attacked, and either hanging or takeable by a cheaper piece."""
    piece = board.piece_at(square)
    if piece is None:
        return False
    if not defenders_of(board, square, not piece.color):
        return False
    return is_hanging(board, square) or can_be_taken_by_lower_piece(board, square)


def is_trapped(board: chess.Board, square: chess.Square) -> bool:
    """Is the piece on square in a bad spot with no safe escape?

    The piece's side must be to move on board. Pawns and kings are never
    trapped, nor is anything while its side is in check or the piece is pinned.
    """
    piece = board.piece_at(square)
    if piece is None or piece.color != board.turn:
        return False
    if piece.piece_type in (chess.PAWN, chess.KING):
        return False
    if board.is_check() or board.is_pinned(board.turn, square):
        return False
    if not is_in_bad_spot(board, square):
        return False
    value = get_piece_value(piece.piece_type, king=0)
    probe = board.copy(stack=False)
    for escape in list(probe.legal_moves):
        if escape.from_square != square:
            continue
        captured = probe.piece_type_at(escape.to_square)
        if captured and get_piece_value(captured, king=0) >= value:
            return False
        probe.push(escape)
        safe = not is_in_bad_spot(probe, escape.to_square)
        probe.pop()
        if safe:
            return False
    return True

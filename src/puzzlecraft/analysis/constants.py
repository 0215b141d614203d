"""Constants and small utility functions shared across analysis submodules."""

import chess

__all__ = [
    "MATE_SCORE",
    "SEE_VALUES",
    "get_piece_value",
    "see_value",
    "ORTHOGONAL",
    "DIAGONAL",
    "RAY_DIRS",
]

# Engine scores at or beyond this magnitude encode a forced mate, not material
MATE_SCORE = 10000

# Centipawn piece values for exchange and threat calculations
SEE_VALUES: dict[chess.PieceType, int] = {
    chess.PAWN: 100,
    chess.KNIGHT: 300,
    chess.BISHOP: 300,
    chess.ROOK: 500,
    chess.QUEEN: 900,
    chess.KING: 10000,  # a king may recapture but is never traded off
}


def get_piece_value(piece_type: chess.PieceType, *, king=None) -> int:
    """Get standard piece value. King value must be explicitly provided.

    king=None (default) causes TypeError if caller forgets to handle king,
    so king values are always chosen at the call site.
    """
    return {
        chess.PAWN: 1, chess.KNIGHT: 3, chess.BISHOP: 3,
        chess.ROOK: 5, chess.QUEEN: 9, chess.KING: king,
    }[piece_type]


def see_value(piece_type: chess.PieceType | None) -> int:
    """Centipawn value of a piece type, 0 for an empty square."""
    if piece_type is None:
        return 0
    return SEE_VALUES[piece_type]


ORTHOGONAL = [(0, 1), (0, -1), (1, 0), (-1, 0)]
DIAGONAL = [(1, 1), (1, -1), (-1, 1), (-1, -1)]

RAY_DIRS: dict[chess.PieceType, list[tuple[int, int]]] = {
    chess.ROOK: ORTHOGONAL,
    chess.BISHOP: DIAGONAL,
    chess.QUEEN: ORTHOGONAL + DIAGONAL,
}

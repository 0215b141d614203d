"""Turn-agnostic attack geometry.

Which squares does a piece control by movement rules alone? The answer
ignores whose turn it is and whether the destination holds a friendly or
an enemy piece, so it reports defence of one's own pieces as readily as
attacks on the opponent's. Legal-move generation can't do that: it never
produces a capture of a same-colored piece. Board.attacks_mask() and
Board.attackers_mask() are pure geometry and fit.
"""

import chess

__all__ = [
    "control_mask",
    "controls",
    "attacked_squares",
    "defenders_of",
    "is_attacked",
    "attackers_after_removal",
    "line_through",
]


def control_mask(board: chess.Board, square: chess.Square) -> int:
    """Bitboard of every square the piece on square controls (0 if empty).

    Pawns control their capture diagonals only.
    """
    return board.attacks_mask(square)


def controls(board: chess.Board, piece_square: chess.Square, target_square: chess.Square) -> bool:
    """True if the piece on piece_square could move or capture onto target_square."""
    if piece_square == target_square:
        return False
    return bool(control_mask(board, piece_square) & chess.BB_SQUARES[target_square])


def attacked_squares(board: chess.Board, color: chess.Color) -> chess.SquareSet:
    """Union of the squares any piece of color controls."""
    mask = 0
    for sq in chess.SquareSet(board.occupied_co[color]):
        mask |= control_mask(board, sq)
    return chess.SquareSet(mask)


def defenders_of(board: chess.Board, square: chess.Square, color: chess.Color) -> chess.SquareSet:
    """Squares of every color piece that controls square, whoever stands on it."""
    return chess.SquareSet(board.attackers_mask(color, square))


def is_attacked(board: chess.Board, square: chess.Square) -> bool:
    """Does the opposite color of the occupant control square?"""
    piece = board.piece_at(square)
    if piece is None:
        return False
    return bool(defenders_of(board, square, not piece.color))


def attackers_after_removal(
    board: chess.Board,
    square: chess.Square,
    color: chess.Color,
    removed: list[chess.Square],
) -> chess.SquareSet:
    """defenders_of() on a copy of board with the removed squares emptied.

    Reveals x-ray control: a slider standing behind a removed piece
    controls the square once the line opens.
    """
    bc = board.copy(stack=False)
    for sq in removed:
        bc.remove_piece_at(sq)
    return defenders_of(bc, square, color)


def line_through(a: chess.Square, b: chess.Square) -> chess.SquareSet:
    """Squares strictly between a and b when they share a rank, file or diagonal."""
    return chess.SquareSet(chess.between(a, b))

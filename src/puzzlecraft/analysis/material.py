"""Material counting: totals, balance, and the piece count used for phase tests."""

from dataclasses import dataclass

import chess

__all__ = [
    "MaterialCount",
    "MaterialInfo",
    "analyze_material",
    "material_balance",
    "piece_count",
]

# Shared field mapping for MaterialCount ↔ piece values
_PIECE_FIELDS: list[tuple[str, chess.PieceType, int]] = [
    ("pawns", chess.PAWN, 1),
    ("knights", chess.KNIGHT, 3),
    ("bishops", chess.BISHOP, 3),
    ("rooks", chess.ROOK, 5),
    ("queens", chess.QUEEN, 9),
]


@dataclass
class MaterialCount:
    pawns: int = 0
    knights: int = 0
    bishops: int = 0
    rooks: int = 0
    queens: int = 0


@dataclass
class MaterialInfo:
    white: MaterialCount
    black: MaterialCount
    white_total: int
    black_total: int
    imbalance: int  # white_total - black_total


def _count_material(board: chess.Board, color: chess.Color) -> MaterialCount:
    return MaterialCount(
        pawns=len(board.pieces(chess.PAWN, color)),
        knights=len(board.pieces(chess.KNIGHT, color)),
        bishops=len(board.pieces(chess.BISHOP, color)),
        rooks=len(board.pieces(chess.ROOK, color)),
        queens=len(board.pieces(chess.QUEEN, color)),
    )


def _material_total(mc: MaterialCount) -> int:
    return sum(getattr(mc, fname) * val for fname, _, val in _PIECE_FIELDS)


def analyze_material(board: chess.Board) -> MaterialInfo:
    wc = _count_material(board, chess.WHITE)
    bc = _count_material(board, chess.BLACK)
    wt = _material_total(wc)
    bt = _material_total(bc)
    return MaterialInfo(
        white=wc,
        black=bc,
        white_total=wt,
        black_total=bt,
        imbalance=wt - bt,
    )


def material_balance(board: chess.Board, color: chess.Color) -> int:
    """Material lead of color in pawn units (negative when behind)."""
    info = analyze_material(board)
    if color == chess.WHITE:
        return info.imbalance
    return -info.imbalance


def piece_count(board: chess.Board) -> int:
    """Number of knights, bishops, rooks and queens on the board, both colors."""
    count = 0
    for pt in (chess.KNIGHT, chess.BISHOP, chess.ROOK, chess.QUEEN):
        count += len(board.pieces(pt, chess.WHITE)) + len(board.pieces(pt, chess.BLACK))
    return count

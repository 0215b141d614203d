"""Ray-based line detection: absolute pins, skewers, batteries."""

from dataclasses import dataclass, field

import chess

from puzzlecraft.analysis.constants import DIAGONAL, ORTHOGONAL, RAY_DIRS, get_piece_value


@dataclass(frozen=True)
class Pin:
    pinner: chess.Square
    pinned: chess.Square
    king: chess.Square


@dataclass(frozen=True)
class Skewer:
    attacker: chess.Square
    front: chess.Square
    behind: chess.Square


@dataclass(frozen=True)
class Battery:
    """Two friendly sliders lined up on one ray toward an enemy piece."""
    rear: chess.Square
    front: chess.Square
    target: chess.Square


@dataclass
class RayMotifs:
    pins: list[Pin] = field(default_factory=list)
    skewers: list[Skewer] = field(default_factory=list)
    batteries: list[Battery] = field(default_factory=list)


def _walk_ray(
    board: chess.Board,
    start_sq: int,
    direction: tuple[int, int],
) -> tuple[int | None, int | None]:
    """Walk a ray from start_sq, return (first_hit_sq, second_hit_sq) or None."""
    df, dr = direction
    f = chess.square_file(start_sq) + df
    r = chess.square_rank(start_sq) + dr
    first = None
    while 0 <= f <= 7 and 0 <= r <= 7:
        sq = chess.square(f, r)
        if board.piece_at(sq) is not None:
            if first is None:
                first = sq
            else:
                return first, sq
        f += df
        r += dr
    return first, None


def _slides_along(piece_type: chess.PieceType, direction: tuple[int, int]) -> bool:
    if piece_type == chess.QUEEN:
        return True
    if piece_type == chess.ROOK:
        return direction in ORTHOGONAL
    if piece_type == chess.BISHOP:
        return direction in DIAGONAL
    return False


def _value(piece_type: chess.PieceType) -> int:
    return get_piece_value(piece_type, king=1000)


def find_ray_motifs(board: chess.Board, color: chess.Color) -> RayMotifs:
    """Single-pass ray analysis of color's sliders.

    For each slider, walk each ray direction. When two pieces are found along
    the ray, classify by the colors and values of the first and second piece.
    """
    result = RayMotifs()
    enemy = not color

    for pt in (chess.BISHOP, chess.ROOK, chess.QUEEN):
        for slider_sq in board.pieces(pt, color):
            for direction in RAY_DIRS[pt]:
                first_sq, second_sq = _walk_ray(board, slider_sq, direction)
                if first_sq is None or second_sq is None:
                    continue
                first = board.piece_at(first_sq)
                second = board.piece_at(second_sq)

                if first.color == enemy and second.color == enemy:
                    if second.piece_type == chess.KING:
                        result.pins.append(Pin(slider_sq, first_sq, second_sq))
                    elif (first.piece_type in (chess.ROOK, chess.QUEEN, chess.KING)
                          and second.piece_type != chess.PAWN
                          and _value(second.piece_type) < _value(first.piece_type)
                          and _value(pt) <= _value(first.piece_type)):
                        # Front piece must move and isn't cheaper than the attacker
                        result.skewers.append(Skewer(slider_sq, first_sq, second_sq))

                elif first.color == color and second.color == enemy:
                    if _slides_along(first.piece_type, direction):
                        result.batteries.append(Battery(slider_sq, first_sq, second_sq))

    return result


def absolute_pins(board: chess.Board, color: chess.Color, min_value: int = 3) -> list[Pin]:
    """Enemy pieces worth at least min_value pinned to their king by color."""
    return [
        pin for pin in find_ray_motifs(board, color).pins
        if _value(board.piece_type_at(pin.pinned)) >= min_value
    ]

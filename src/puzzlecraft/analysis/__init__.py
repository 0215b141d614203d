"""Pure-function board analysis: geometry, exchanges, threats, lines.

All functions take a chess.Board and return plain values or dataclass
instances. No engine, no side effects; boards are copied before any push.
"""

from puzzlecraft.analysis.constants import MATE_SCORE, SEE_VALUES, get_piece_value, see_value
from puzzlecraft.analysis.geometry import (
    attacked_squares,
    attackers_after_removal,
    control_mask,
    controls,
    defenders_of,
    is_attacked,
    line_through,
)
from puzzlecraft.analysis.material import material_balance, piece_count
from puzzlecraft.analysis.rays import find_ray_motifs
from puzzlecraft.analysis.safety import is_defended, is_hanging, is_in_bad_spot, is_trapped
from puzzlecraft.analysis.see import see
from puzzlecraft.analysis.threats import has_mate_in_one, threats_for, winning_captures

__all__ = [
    "MATE_SCORE",
    "SEE_VALUES",
    "get_piece_value",
    "see_value",
    "attacked_squares",
    "attackers_after_removal",
    "control_mask",
    "controls",
    "defenders_of",
    "is_attacked",
    "line_through",
    "material_balance",
    "piece_count",
    "find_ray_motifs",
    "is_defended",
    "is_hanging",
    "is_in_bad_spot",
    "is_trapped",
    "see",
    "has_mate_in_one",
    "threats_for",
    "winning_captures",
]

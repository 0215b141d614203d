"""Puzzle classification types: inputs, intermediate results, and outputs."""

from dataclasses import dataclass, field
import enum

import chess


# ---------------------------------------------------------------------------
# Classification axes
# ---------------------------------------------------------------------------


class Category(enum.Enum):
    """Training intent of a puzzle. At most one applies; None means unholdable."""
    OPENING = "opening"
    TACTICS = "tactics"
    ENDGAME = "endgame"
    DEFENDING = "defending"
    ATTACKING = "attacking"
    STRATEGIC = "strategic"


class Severity(enum.Enum):
    MISSED_WIN = "missed_win"
    MISSED_SAVE = "missed_save"
    BLUNDER = "blunder"
    MISTAKE = "mistake"


class Label(enum.Enum):
    """Tactical motif tags. Declaration order is the canonical output order."""
    FORK = "fork"
    PIN = "pin"
    SKEWER = "skewer"
    DOUBLE_ATTACK = "double_attack"
    DISCOVERED_ATTACK = "discovered_attack"
    REMOVAL_OF_DEFENDER = "removal_of_defender"
    OVERLOAD = "overload"
    DEFLECTION = "deflection"
    INTERMEZZO = "intermezzo"
    SACRIFICE = "sacrifice"
    DEFENSIVE_SACRIFICE = "defensive_sacrifice"
    CLEARANCE = "clearance"
    BACK_RANK = "back_rank"
    MATE_THREAT = "mate_threat"
    CHECKMATE = "checkmate"
    SMOTHERED_MATE = "smothered_mate"
    TRAPPED_PIECE = "trapped_piece"
    X_RAY = "x_ray"
    INTERFERENCE = "interference"
    DESPERADO = "desperado"
    ATTRACTION = "attraction"
    PERPETUAL_CHECK = "perpetual_check"
    STALEMATE = "stalemate"


_LABEL_ORDER = {label: i for i, label in enumerate(Label)}


def sort_labels(labels) -> tuple[Label, ...]:
    """Deduplicate and order labels by declaration order."""
    return tuple(sorted(set(labels), key=_LABEL_ORDER.__getitem__))


# Labels that make a position a "tactics" puzzle. Quiet or defensive
# resources (an in-between check, a standing mate threat, a sacrifice made
# to survive, drawing mechanisms) don't.
TACTICAL_LABELS: frozenset[Label] = frozenset(Label) - {
    Label.INTERMEZZO,
    Label.MATE_THREAT,
    Label.DEFENSIVE_SACRIFICE,
    Label.PERPETUAL_CHECK,
    Label.STALEMATE,
}


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    """An engine-evaluated position. eval_cp is from White's perspective."""
    fen: str
    eval_cp: int | None = None
    best_move: str | None = None
    pv: tuple[str, ...] = ()
    ply: int | None = None
    depth: int | None = None

    def board(self) -> chess.Board:
        """Fresh board for this position.

        Raises ValueError on a malformed FEN or an impossible position.
        """
        board = chess.Board(self.fen)
        if not board.is_valid():
            raise ValueError(f"Illegal position: {self.fen}")
        return board


@dataclass(frozen=True)
class ClassificationContext:
    position: Position
    eval_before_cp: int | None
    eval_after_cp: int | None
    side_to_move: chess.Color
    prev_eval_cp: int | None = None       # one ply earlier, White perspective
    prev_prev_eval_cp: int | None = None  # two plies earlier, White perspective

    @property
    def user_eval(self) -> int | None:
        """eval_before_cp from the mover's perspective."""
        if self.eval_before_cp is None:
            return None
        return self.eval_before_cp if self.side_to_move == chess.WHITE else -self.eval_before_cp

    @property
    def cp_loss(self) -> int:
        if self.eval_before_cp is None or self.eval_after_cp is None:
            return 0
        return abs(self.eval_after_cp - self.eval_before_cp)


# ---------------------------------------------------------------------------
# Threat search results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Threat:
    source: chess.Square
    target: chess.Square
    target_piece: chess.PieceType
    gain: int  # centipawns won by the capture after SEE, > 0


@dataclass(frozen=True)
class ThreatInfo:
    max_material_win: int = 0
    can_deliver_mate: bool = False
    threats: tuple[Threat, ...] = field(default_factory=tuple)

    def is_concrete(self, min_gain: int = 100) -> bool:
        """Mate, or a capture winning at least min_gain centipawns."""
        return self.can_deliver_mate or self.max_material_win >= min_gain


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Classification:
    category: Category | None
    severity: Severity
    labels: tuple[Label, ...] = ()

    def to_dict(self) -> dict:
        return {
            "category": self.category.value if self.category else None,
            "severity": self.severity.value,
            "labels": [label.value for label in self.labels],
        }


@dataclass(frozen=True)
class PvAnalysis:
    forced_moves: tuple[str, ...]
    required_moves: int

    def to_dict(self) -> dict:
        return {
            "forced_moves": list(self.forced_moves),
            "required_moves": self.required_moves,
        }

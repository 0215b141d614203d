"""Motif label detection.

Each label is one MotifSpec entry pairing it with a detector over a shared
MotifContext. Adding a motif means adding one detector and one entry.
Detectors are independent: any number may fire on one position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import chess

from puzzlecraft.config import ClassifierSettings, get_settings
from puzzlecraft.motifs.attacks import detect_double_attack, detect_fork, detect_trapped_piece
from puzzlecraft.motifs.context import MotifContext, build_context
from puzzlecraft.motifs.defenders import detect_deflection, detect_overload, detect_removal_of_defender
from puzzlecraft.motifs.lines import (
    detect_clearance,
    detect_discovered_attack,
    detect_interference,
    detect_pin,
    detect_skewer,
    detect_x_ray,
)
from puzzlecraft.motifs.mating import (
    detect_back_rank,
    detect_checkmate,
    detect_mate_threat,
    detect_perpetual_check,
    detect_smothered_mate,
    detect_stalemate,
)
from puzzlecraft.motifs.sacrifices import (
    detect_attraction,
    detect_defensive_sacrifice,
    detect_desperado,
    detect_intermezzo,
    detect_sacrifice,
)
from puzzlecraft.types import Category, Label, sort_labels

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MotifSpec:
    label: Label
    detect: Callable[[MotifContext], bool]
    family: str


MOTIF_REGISTRY: tuple[MotifSpec, ...] = (
    MotifSpec(Label.CHECKMATE, detect_checkmate, "mating"),
    MotifSpec(Label.BACK_RANK, detect_back_rank, "mating"),
    MotifSpec(Label.SMOTHERED_MATE, detect_smothered_mate, "mating"),
    MotifSpec(Label.MATE_THREAT, detect_mate_threat, "mating"),
    MotifSpec(Label.STALEMATE, detect_stalemate, "mating"),
    MotifSpec(Label.PERPETUAL_CHECK, detect_perpetual_check, "mating"),
    MotifSpec(Label.PIN, detect_pin, "lines"),
    MotifSpec(Label.SKEWER, detect_skewer, "lines"),
    MotifSpec(Label.X_RAY, detect_x_ray, "lines"),
    MotifSpec(Label.DISCOVERED_ATTACK, detect_discovered_attack, "lines"),
    MotifSpec(Label.CLEARANCE, detect_clearance, "lines"),
    MotifSpec(Label.INTERFERENCE, detect_interference, "lines"),
    MotifSpec(Label.FORK, detect_fork, "attacks"),
    MotifSpec(Label.DOUBLE_ATTACK, detect_double_attack, "attacks"),
    MotifSpec(Label.TRAPPED_PIECE, detect_trapped_piece, "attacks"),
    MotifSpec(Label.REMOVAL_OF_DEFENDER, detect_removal_of_defender, "defenders"),
    MotifSpec(Label.OVERLOAD, detect_overload, "defenders"),
    MotifSpec(Label.DEFLECTION, detect_deflection, "defenders"),
    MotifSpec(Label.SACRIFICE, detect_sacrifice, "sacrifices"),
    MotifSpec(Label.DEFENSIVE_SACRIFICE, detect_defensive_sacrifice, "sacrifices"),
    MotifSpec(Label.DESPERADO, detect_desperado, "sacrifices"),
    MotifSpec(Label.ATTRACTION, detect_attraction, "sacrifices"),
    MotifSpec(Label.INTERMEZZO, detect_intermezzo, "sacrifices"),
)

assert {spec.label for spec in MOTIF_REGISTRY} == set(Label), "every Label needs a detector"


def _run(spec: MotifSpec, ctx: MotifContext) -> bool:
    try:
        return bool(spec.detect(ctx))
    except (ValueError, IndexError, KeyError, TypeError, AssertionError, AttributeError) as e:
        # Inconsistent upstream data (odd FEN, bad PV): this motif just doesn't fire
        logger.debug("%s detector failed on %s: %s", spec.label.value, ctx.board.fen(), e)
        return False


def run_detectors(ctx: MotifContext) -> tuple[Label, ...]:
    return sort_labels(spec.label for spec in MOTIF_REGISTRY if _run(spec, ctx))


def detect_labels(
    board: chess.Board,
    best_move: str | None,
    pv=(),
    category: Category | None = None,
    settings: ClassifierSettings | None = None,
) -> tuple[Label, ...]:
    """Tactical motifs in the solution starting with best_move.

    A defending category turns a sacrifice into a defensive sacrifice.
    Returns an empty tuple for an impossible board, or when best_move is
    missing, malformed or illegal.
    """
    settings = settings or get_settings()
    if not board.is_valid():
        return ()
    defending = category == Category.DEFENDING
    ctx = build_context(board, best_move, pv, settings, defending=defending)
    if ctx is None:
        return ()
    return run_detectors(ctx)


__all__ = [
    "MOTIF_REGISTRY",
    "MotifContext",
    "MotifSpec",
    "build_context",
    "detect_labels",
    "run_detectors",
]

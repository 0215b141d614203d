"""Puzzle classification entry points.

classify_puzzle() assigns the three independent axes (category, severity,
labels) of one evaluated position; analyze_pv() sizes the forced line.
Both are pure: the same inputs always give the same result.
"""

import logging

from puzzlecraft.category import CATEGORY_RULES, build_facts, decide, is_defending
from puzzlecraft.config import ClassifierSettings, get_settings
from puzzlecraft.motifs import detect_labels
from puzzlecraft.pv import analyze_pv
from puzzlecraft.severity import classify_severity
from puzzlecraft.types import Category, Classification, ClassificationContext

logger = logging.getLogger(__name__)

__all__ = ["classify_puzzle", "analyze_pv"]


def classify_puzzle(
    ctx: ClassificationContext,
    settings: ClassifierSettings | None = None,
) -> Classification:
    """Category, severity and motif labels for a puzzle position.

    A malformed FEN, an impossible position or a missing eval/best move
    never raises: the category
    falls to None, labels stay empty and severity to its baseline.
    """
    settings = settings or get_settings()
    severity = classify_severity(ctx.eval_before_cp, ctx.side_to_move, ctx.cp_loss, settings)
    position = ctx.position

    try:
        board = position.board()
    except ValueError as e:
        logger.debug("Unreadable position, no category: %s", e)
        return Classification(category=None, severity=severity, labels=())

    facts = build_facts(
        board,
        ctx.side_to_move,
        ctx.eval_before_cp,
        position.best_move,
        position.ply,
        settings=settings,
    )
    # Labels are detected once; a defending position turns a sacrifice defensive
    hint = Category.DEFENDING if is_defending(facts) else None
    facts.labels = detect_labels(board, position.best_move, position.pv, category=hint, settings=settings)
    category = decide(facts, CATEGORY_RULES)
    return Classification(category=category, severity=severity, labels=facts.labels)

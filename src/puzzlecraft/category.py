"""Category classification: what the position demanded of the player.

The decision procedure is an ordered tuple of guarded rules. The first
rule whose guard holds decides the category, so at most one category can
ever apply. A ``None`` category means the position is lost beyond
recovery (or lacks the data to judge) and shouldn't become a puzzle.
"""

from dataclasses import dataclass, field
import logging
from typing import Callable

import chess

from puzzlecraft.analysis.material import piece_count
from puzzlecraft.analysis.see import see
from puzzlecraft.analysis.threats import threats_for
from puzzlecraft.config import ClassifierSettings, get_settings
from puzzlecraft.motifs import detect_labels
from puzzlecraft.moves import parse_board, parse_move
from puzzlecraft.types import TACTICAL_LABELS, Category, Label, ThreatInfo

logger = logging.getLogger(__name__)


@dataclass
class CategoryFacts:
    """Everything the rules look at, with threat searches computed on demand."""
    board: chess.Board
    side_to_move: chess.Color
    user_eval: int | None
    best_move: chess.Move | None
    ply: int | None
    labels: tuple[Label, ...]
    settings: ClassifierSettings
    _threats: ThreatInfo | None = field(default=None, repr=False)

    @property
    def threats_against_mover(self) -> ThreatInfo:
        if self._threats is None:
            self._threats = threats_for(self.board, self.side_to_move)
        return self._threats


@dataclass(frozen=True)
class CategoryRule:
    category: Category | None
    applies: Callable[[CategoryFacts], bool]


def is_endgame_position(board: chess.Board, settings: ClassifierSettings | None = None) -> bool:
    settings = settings or get_settings()
    return piece_count(board) < settings.endgame_piece_threshold


def has_tactical_motif(labels) -> bool:
    return any(label in TACTICAL_LABELS for label in labels)


def is_unholdable(facts: CategoryFacts) -> bool:
    """Best play still loses decisively, or there's nothing to judge it by."""
    if facts.user_eval is None or facts.best_move is None:
        return True
    s = facts.settings
    floor = s.holdable_floor_endgame_cp if is_endgame_position(facts.board, s) else s.holdable_floor_cp
    return facts.user_eval < floor


def is_opening(facts: CategoryFacts) -> bool:
    return facts.ply is not None and facts.ply <= facts.settings.opening_max_ply


def is_tactics(facts: CategoryFacts) -> bool:
    return has_tactical_motif(facts.labels)


def is_endgame(facts: CategoryFacts) -> bool:
    return is_endgame_position(facts.board, facts.settings)


def _king_attacked(board: chess.Board, color: chess.Color) -> bool:
    king = board.king(color)
    return king is not None and board.is_attacked_by(not color, king)


def is_defending(facts: CategoryFacts) -> bool:
    """A concrete threat against the mover, and the best move only survives it.

    The engine eval already assumes best play, so the mover-perspective
    eval before the move doubles as the eval after the best move.
    """
    if facts.user_eval is None or facts.user_eval > facts.settings.survival_ceiling_cp:
        return False
    if _king_attacked(facts.board, facts.side_to_move):
        return True
    return facts.threats_against_mover.is_concrete(facts.settings.material_threat_min_cp)


def is_attacking(facts: CategoryFacts) -> bool:
    """The best move executes a threat (winning capture, check, mate) or creates one."""
    move = facts.best_move
    if move is None:
        return False
    min_gain = facts.settings.material_threat_min_cp
    if facts.board.piece_at(move.to_square) is not None:
        if see(facts.board, move.from_square, move.to_square) >= min_gain:
            return True
    after = facts.board.copy(stack=False)
    after.push(move)
    if after.is_check():
        return True
    return threats_for(after, not facts.side_to_move).is_concrete(min_gain)


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(None, is_unholdable),
    CategoryRule(Category.OPENING, is_opening),
    CategoryRule(Category.TACTICS, is_tactics),
    CategoryRule(Category.ENDGAME, is_endgame),
    CategoryRule(Category.DEFENDING, is_defending),
    CategoryRule(Category.ATTACKING, is_attacking),
    CategoryRule(Category.STRATEGIC, lambda facts: True),
)

# Arena statistics classify every position, lost ones included
ARENA_RULES: tuple[CategoryRule, ...] = CATEGORY_RULES[1:]


def decide(facts: CategoryFacts, rules: tuple[CategoryRule, ...] = CATEGORY_RULES) -> Category | None:
    for rule in rules:
        if rule.applies(facts):
            return rule.category
    return None


def build_facts(
    board: chess.Board,
    side_to_move: chess.Color,
    eval_cp: int | None,
    best_move: str | None,
    ply: int | None,
    labels=(),
    settings: ClassifierSettings | None = None,
) -> CategoryFacts:
    """eval_cp is White-perspective; the facts hold it from the mover's side."""
    settings = settings or get_settings()
    user_eval = None
    if eval_cp is not None:
        user_eval = eval_cp if side_to_move == chess.WHITE else -eval_cp
    return CategoryFacts(
        board=board,
        side_to_move=side_to_move,
        user_eval=user_eval,
        best_move=parse_move(board, best_move),
        ply=ply,
        labels=tuple(labels),
        settings=settings,
    )


def classify_position_category(
    fen: str,
    ply: int,
    eval_cp: int | None,
    side_to_move: chess.Color,
    best_move: str | None,
    pv=(),
    settings: ClassifierSettings | None = None,
) -> Category:
    """Category of any game position, without the holdability filter.

    Without an eval or a usable best move only the phase can be judged:
    opening, endgame or strategic.
    """
    settings = settings or get_settings()
    board = parse_board(fen)
    if board is None:
        logger.debug("Unreadable FEN for position category: %r", fen)
        return Category.STRATEGIC
    facts = build_facts(board, side_to_move, eval_cp, best_move, ply, settings=settings)
    if is_opening(facts):
        return Category.OPENING
    if facts.user_eval is None or facts.best_move is None:
        return Category.ENDGAME if is_endgame(facts) else Category.STRATEGIC
    facts.labels = detect_labels(board, best_move, pv, settings=settings)
    return decide(facts, ARENA_RULES)

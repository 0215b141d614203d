"""How costly the player's mistake was, from the eval swing alone."""

import chess

from puzzlecraft.config import ClassifierSettings, get_settings
from puzzlecraft.types import Severity


def classify_severity(
    eval_before_cp: int | None,
    side_to_move: chess.Color,
    cp_loss: int,
    settings: ClassifierSettings | None = None,
) -> Severity:
    """First match wins: missed win, missed save, blunder, else mistake.

    eval_before_cp is White-perspective; cp_loss is the absolute eval swing.
    """
    settings = settings or get_settings()
    if eval_before_cp is None:
        return Severity.MISTAKE

    user_eval = eval_before_cp if side_to_move == chess.WHITE else -eval_before_cp

    if user_eval >= settings.severity_decisive_eval_cp and cp_loss >= settings.severity_missed_cp:
        return Severity.MISSED_WIN
    if user_eval <= -settings.severity_decisive_eval_cp and cp_loss >= settings.severity_missed_cp:
        return Severity.MISSED_SAVE
    if cp_loss >= settings.severity_blunder_cp:
        return Severity.BLUNDER
    return Severity.MISTAKE

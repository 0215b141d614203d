"""How much of the principal variation is a forced sequence.

Puzzles follow the lichess convention: the line continues only while the
opponent's replies are forced, and it always ends on the solver's move.
"""

import logging
import math

import chess

from puzzlecraft.analysis.threats import threats_for
from puzzlecraft.config import ClassifierSettings, get_settings
from puzzlecraft.moves import parse_board, parse_move
from puzzlecraft.types import PvAnalysis

logger = logging.getLogger(__name__)


def _reply_is_forced(
    board: chess.Board,
    reply: chess.Move | None,
    last_capture_square: chess.Square | None,
    settings: ClassifierSettings,
) -> bool:
    """Is the opponent (to move on board) limited to this reply by the position?"""
    if board.is_check():
        return True
    if board.legal_moves.count() <= settings.forced_legal_move_ceiling:
        return True
    if (reply is not None and last_capture_square is not None
            and reply.to_square == last_capture_square and board.is_capture(reply)):
        return True
    # The solver threatens mate if allowed to move again
    return threats_for(board, board.turn).can_deliver_mate


def _single_move(pv: list[str]) -> PvAnalysis:
    return PvAnalysis(forced_moves=tuple(pv[:1]), required_moves=1)


def analyze_pv(
    fen: str,
    pv,
    eval_cp: int | None,
    settings: ClassifierSettings | None = None,
) -> PvAnalysis:
    """Forced prefix of pv from the position fen.

    pv is a sequence of UCI strings (or one space-separated string).
    eval_cp is the White-perspective eval; a magnitude at or beyond the
    mate threshold marks every reply as forced. The result always ends on
    the solver's move and has at least 3 plies, otherwise it collapses to
    the single best move.
    """
    settings = settings or get_settings()
    if isinstance(pv, str):
        pv = pv.split()
    moves = [m for m in (pv or []) if m]
    if not moves:
        return PvAnalysis(forced_moves=(), required_moves=1)

    board = parse_board(fen)
    if board is None:
        logger.debug("Unreadable FEN, single-move puzzle: %r", fen)
        return _single_move(moves)

    mate_sequence = eval_cp is not None and abs(eval_cp) >= settings.mate_eval_threshold_cp
    end_index = 0
    last_capture_square: chess.Square | None = None

    for i, uci in enumerate(moves[:settings.pv_max_plies]):
        move = parse_move(board, uci)
        is_opponent_ply = i % 2 == 1

        if is_opponent_ply and not mate_sequence:
            if not _reply_is_forced(board, move, last_capture_square, settings):
                break

        if move is None:
            logger.debug("PV stops at unplayable move %r (ply %d)", uci, i)
            break

        last_capture_square = move.to_square if board.is_capture(move) else None
        board.push(move)

        if board.is_checkmate():
            end_index = i
            break
        if not is_opponent_ply:
            end_index = i

    forced = moves[:end_index + 1]
    if len(forced) > 1 and len(forced) % 2 == 0:
        forced = forced[:-1]
    if len(forced) < 3:
        return _single_move(moves)
    return PvAnalysis(forced_moves=tuple(forced), required_moves=math.ceil(len(forced) / 2))

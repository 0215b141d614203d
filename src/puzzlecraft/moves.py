"""Move parsing and PV replay on top of python-chess.

Malformed or illegal UCI strings come back as None (or end a replay)
instead of raising, so callers can treat imperfect engine output as a
shorter line.
"""

import logging

import chess

logger = logging.getLogger(__name__)


def parse_move(board: chess.Board, uci: str | None) -> chess.Move | None:
    """Parse uci and check it is legal on board. None when it isn't."""
    if not uci:
        return None
    try:
        move = chess.Move.from_uci(uci)
    except (ValueError, chess.InvalidMoveError):
        return None
    if not board.is_legal(move):
        return None
    return move


def parse_board(fen: str | None) -> chess.Board | None:
    """Board for fen, or None when the FEN is malformed or the position impossible.

    An impossible position (missing king, side not to move in check, ...)
    makes python-chess generate king captures, so it is unreadable too.
    """
    if not fen:
        return None
    try:
        board = chess.Board(fen)
    except ValueError:
        return None
    if not board.is_valid():
        logger.debug("Impossible position %r: %s", fen, board.status())
        return None
    return board


def replay(board: chess.Board, pv, max_plies: int) -> list[tuple[chess.Move, chess.Board]]:
    """Play up to max_plies of pv from board.

    Returns (move, board_after_move) pairs. Stops at the first malformed
    or illegal move, and after a move that ends the game.
    """
    played: list[tuple[chess.Move, chess.Board]] = []
    current = board.copy(stack=False)
    for uci in list(pv)[:max_plies]:
        move = parse_move(current, uci)
        if move is None:
            logger.debug("PV truncated at %r on %s", uci, current.fen())
            break
        current = current.copy(stack=False)
        current.push(move)
        played.append((move, current))
        if current.is_game_over(claim_draw=False):
            break
    return played

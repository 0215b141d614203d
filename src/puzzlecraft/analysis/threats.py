"""Null-move threat search: what would one side win if it could move twice?"""

import chess

from puzzlecraft.analysis.geometry import control_mask
from puzzlecraft.analysis.see import see
from puzzlecraft.types import Threat, ThreatInfo


def _king_attacked(board: chess.Board, color: chess.Color) -> bool:
    king_sq = board.king(color)
    if king_sq is None:
        return False
    return board.is_attacked_by(not color, king_sq)


def null_move_board(board: chess.Board, mover: chess.Color) -> chess.Board:
    """Copy of board with mover to move and en passant cleared."""
    null = board.copy(stack=False)
    null.turn = mover
    null.ep_square = None
    return null


def gives_mate(board: chess.Board, move: chess.Move) -> bool:
    board.push(move)
    try:
        return board.is_checkmate()
    finally:
        board.pop()


def has_mate_in_one(board: chess.Board) -> bool:
    """Does the side to move have a move that checkmates immediately?"""
    probe = board.copy(stack=False)
    return any(gives_mate(probe, move) for move in list(probe.legal_moves))


def threats_for(board: chess.Board, side_to_move: chess.Color) -> ThreatInfo:
    """Threats against side_to_move if it passed and the opponent moved.

    Every opponent reply on a null-move board is tested for checkmate,
    and every capture of a standing piece is scored with SEE. Returns an
    empty ThreatInfo when side_to_move is already in check.
    """
    if _king_attacked(board, side_to_move):
        return ThreatInfo()

    opponent = not side_to_move
    null = null_move_board(board, opponent)
    can_mate = False
    threats: list[Threat] = []
    seen: set[tuple[int, int]] = set()

    for move in list(null.legal_moves):
        if not can_mate and gives_mate(null, move):
            can_mate = True
        victim = null.piece_type_at(move.to_square)
        # Underpromotions repeat the same capture
        if victim is None or (move.from_square, move.to_square) in seen:
            continue
        seen.add((move.from_square, move.to_square))
        gain = see(null, move.from_square, move.to_square)
        if gain > 0:
            threats.append(Threat(
                source=move.from_square,
                target=move.to_square,
                target_piece=victim,
                gain=gain,
            ))

    threats.sort(key=lambda t: (-t.gain, t.source, t.target))
    return ThreatInfo(
        max_material_win=threats[0].gain if threats else 0,
        can_deliver_mate=can_mate,
        threats=tuple(threats),
    )


def winning_captures(board: chess.Board, color: chess.Color) -> list[Threat]:
    """Every capture by color that wins material after SEE, regardless of turn.

    Kings are never counted as targets.
    """
    result: list[Threat] = []
    for src in chess.SquareSet(board.occupied_co[color]):
        targets = control_mask(board, src) & board.occupied_co[not color] & ~board.kings
        for dst in chess.SquareSet(targets):
            gain = see(board, src, dst)
            if gain > 0:
                result.append(Threat(
                    source=src,
                    target=dst,
                    target_piece=board.piece_type_at(dst),
                    gain=gain,
                ))
    return result

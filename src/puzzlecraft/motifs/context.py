"""Shared state for motif detectors: the position, the best move, and its PV replay."""

from dataclasses import dataclass, field

import chess

from puzzlecraft.analysis.constants import get_piece_value
from puzzlecraft.analysis.material import material_balance
from puzzlecraft.config import ClassifierSettings
from puzzlecraft.moves import parse_move, replay


@dataclass
class MotifContext:
    board: chess.Board                 # position before the best move
    move: chess.Move                   # the best move, known legal
    after: chess.Board                 # position after the best move
    line: list[tuple[chess.Move, chess.Board]]  # PV replay, line[0] is the best move
    settings: ClassifierSettings
    defending: bool = False            # category hint: the mover is surviving a threat
    _cache: dict = field(default_factory=dict, repr=False)

    @property
    def mover(self) -> chess.Color:
        return self.board.turn

    @property
    def opponent(self) -> chess.Color:
        return not self.board.turn

    @property
    def moved_piece(self) -> chess.Piece:
        return self.board.piece_at(self.move.from_square)

    @property
    def landed_piece(self) -> chess.Piece:
        """The piece on the destination after the move (differs on promotion)."""
        return self.after.piece_at(self.move.to_square)

    @property
    def captured(self) -> chess.PieceType | None:
        if self.board.is_en_passant(self.move):
            return chess.PAWN
        return self.board.piece_type_at(self.move.to_square)

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def gives_check(self) -> bool:
        return self.after.is_check()

    def ply(self, index: int) -> chess.Move | None:
        """Move at PV index (0 is the best move), None past the replayed line."""
        if 0 <= index < len(self.line):
            return self.line[index][0]
        return None

    def board_before(self, index: int) -> chess.Board | None:
        if index == 0:
            return self.board
        if 0 < index <= len(self.line):
            return self.line[index - 1][1]
        return None

    def board_after(self, index: int) -> chess.Board | None:
        if 0 <= index < len(self.line):
            return self.line[index][1]
        return None

    def captured_at(self, index: int) -> chess.PieceType | None:
        move = self.ply(index)
        before = self.board_before(index)
        if move is None or before is None:
            return None
        if before.is_en_passant(move):
            return chess.PAWN
        return before.piece_type_at(move.to_square)

    def material_gained(self, plies: int = 3) -> bool:
        """Did the mover's material balance rise after the given number of plies?"""
        end = self.board_after(plies - 1)
        if end is None:
            return False
        return material_balance(end, self.mover) > material_balance(self.board, self.mover)

    def material_gained_in_line(self) -> bool:
        """Is the mover ahead of the starting balance after any of its own PV moves?"""
        start = material_balance(self.board, self.mover)
        return any(
            material_balance(board, self.mover) > start
            for i, (_, board) in enumerate(self.line) if i % 2 == 0 and i > 0
        )


def value_of(piece_type: chess.PieceType | None) -> int:
    """Pawn-unit value, 0 for kings and empty squares."""
    if piece_type is None:
        return 0
    return get_piece_value(piece_type, king=0)


def build_context(
    board: chess.Board,
    best_move: str | None,
    pv,
    settings: ClassifierSettings,
    defending: bool = False,
) -> MotifContext | None:
    """Build the detector context, or None when best_move isn't legal on board.

    The PV is used only when it starts with the best move; otherwise the
    line is just the best move on its own.
    """
    move = parse_move(board, best_move)
    if move is None:
        return None
    pv = list(pv or [])
    if not pv or pv[0] != move.uci():
        pv = [move.uci()]
    line = replay(board, pv, max(1, settings.motif_pv_plies))
    if not line:
        return None
    return MotifContext(
        board=board.copy(stack=False),
        move=move,
        after=line[0][1],
        line=line,
        settings=settings,
        defending=defending,
    )

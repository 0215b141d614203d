"""UCI engine boundary: eval, best move and PV for a FEN.

The classifier itself never talks to an engine. The CLI opens one engine
process for a run and evaluates the position (and, optionally, the
position after the move actually played).
"""

from dataclasses import dataclass
import logging

import chess
import chess.engine

from puzzlecraft.analysis.constants import MATE_SCORE
from puzzlecraft.moves import parse_board

logger = logging.getLogger(__name__)


@dataclass
class Evaluation:
    score_cp: int | None
    score_mate: int | None
    depth: int
    best_move: str | None
    pv: list[str]

    @classmethod
    def from_info(cls, info: chess.engine.InfoDict, depth: int) -> "Evaluation":
        score = info["score"].white()
        pv = info.get("pv", [])
        return cls(
            score_cp=score.score(),
            score_mate=score.mate(),
            depth=info.get("depth", depth),
            best_move=pv[0].uci() if pv else None,
            pv=[m.uci() for m in pv],
        )

    @property
    def centipawns(self) -> int | None:
        """White-perspective score, forced mates mapped to +/-MATE_SCORE."""
        if self.score_mate is not None:
            return MATE_SCORE if self.score_mate > 0 else -MATE_SCORE
        return self.score_cp


class EngineAnalysis:
    """One UCI engine process, opened with ``async with``."""

    def __init__(self, engine_path: str = "stockfish"):
        self._path = engine_path
        self._engine: chess.engine.UciProtocol | None = None

    async def __aenter__(self):
        _, self._engine = await chess.engine.popen_uci(self._path)
        return self

    async def __aexit__(self, *exc):
        engine, self._engine = self._engine, None
        if engine is None:
            return
        try:
            await engine.quit()
        except chess.engine.EngineError:
            logger.debug("Engine %s already gone on quit", self._path)

    async def evaluate(self, fen: str, depth: int = 18) -> Evaluation:
        if self._engine is None:
            raise RuntimeError("Engine not running; use 'async with EngineAnalysis()'")
        board = parse_board(fen)
        if board is None:
            raise ValueError(f"Invalid or impossible position: {fen}")
        try:
            info = await self._engine.analyse(board, chess.engine.Limit(depth=depth))
        except chess.engine.EngineTerminatedError as e:
            self._engine = None
            raise RuntimeError(f"Engine {self._path} terminated during analysis") from e
        return Evaluation.from_info(info, depth)

import shutil

import chess
import chess.engine
import pytest

from puzzlecraft.engine import EngineAnalysis, Evaluation

STARTING = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
# Illegal FEN: black to move, white king in check from a1 rook (opposite check)
ILLEGAL_FEN = "8/8/8/8/8/8/6k1/r3K3 b - - 0 1"


def _info(score, pv=("e2e4", "e7e5"), depth=12):
    return {
        "score": score,
        "pv": [chess.Move.from_uci(m) for m in pv],
        "depth": depth,
    }


class FakeEngine:
    """Stands in for a UCI protocol object: canned analyse results, no process."""

    def __init__(self, info):
        self.info = info
        self.calls = 0
        self.quit_called = False

    async def analyse(self, board, limit, **kwargs):
        self.calls += 1
        return self.info

    async def quit(self):
        self.quit_called = True


@pytest.fixture
def engine():
    e = EngineAnalysis()
    e._engine = FakeEngine(_info(chess.engine.PovScore(chess.engine.Cp(35), chess.WHITE)))
    return e


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


async def test_evaluate_returns_white_perspective(engine):
    result = await engine.evaluate(STARTING, depth=10)
    assert result == Evaluation(score_cp=35, score_mate=None, depth=12, best_move="e2e4", pv=["e2e4", "e7e5"])
    assert result.centipawns == 35


async def test_black_pov_score_is_flipped(engine):
    engine._engine = FakeEngine(_info(chess.engine.PovScore(chess.engine.Cp(50), chess.BLACK)))
    result = await engine.evaluate(STARTING)
    assert result.score_cp == -50


@pytest.mark.parametrize("mate,expected", [(3, 10000), (-2, -10000)])
async def test_mate_maps_to_mate_score(engine, mate, expected):
    engine._engine = FakeEngine(_info(chess.engine.PovScore(chess.engine.Mate(mate), chess.WHITE)))
    result = await engine.evaluate(STARTING)
    assert result.score_mate == mate
    assert result.centipawns == expected


async def test_empty_pv(engine):
    engine._engine = FakeEngine(_info(chess.engine.PovScore(chess.engine.Cp(0), chess.WHITE), pv=()))
    result = await engine.evaluate(STARTING)
    assert result.best_move is None
    assert result.pv == []


def test_missing_depth_falls_back_to_requested():
    info = {"score": chess.engine.PovScore(chess.engine.Cp(10), chess.WHITE), "pv": []}
    assert Evaluation.from_info(info, 14).depth == 14


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


async def test_evaluate_invalid_fen(engine):
    with pytest.raises(ValueError, match="Invalid or impossible position"):
        await engine.evaluate("not a valid fen")


async def test_evaluate_impossible_position(engine):
    with pytest.raises(ValueError, match="Invalid or impossible position"):
        await engine.evaluate(ILLEGAL_FEN)
    assert engine._engine.calls == 0


async def test_evaluate_outside_context():
    with pytest.raises(RuntimeError, match="not running"):
        await EngineAnalysis().evaluate(STARTING)


# ---------------------------------------------------------------------------
# Engine process lifecycle
# ---------------------------------------------------------------------------


async def test_crash_during_analysis_raises(engine):
    async def crash(board, limit, **kwargs):
        raise chess.engine.EngineTerminatedError("engine process died unexpectedly")

    engine._engine.analyse = crash
    with pytest.raises(RuntimeError, match="terminated during analysis"):
        await engine.evaluate(STARTING)
    assert engine._engine is None


async def test_exit_quits_engine(engine):
    fake = engine._engine
    await engine.__aexit__(None, None, None)
    assert fake.quit_called
    assert engine._engine is None


async def test_exit_tolerates_dead_engine(engine):
    async def dead_quit():
        raise chess.engine.EngineTerminatedError("engine process died unexpectedly")

    engine._engine.quit = dead_quit
    await engine.__aexit__(None, None, None)
    assert engine._engine is None


# ---------------------------------------------------------------------------
# Real engine
# ---------------------------------------------------------------------------


@pytest.mark.skipif(shutil.which("stockfish") is None, reason="stockfish not installed")
async def test_evaluate_with_stockfish():
    async with EngineAnalysis() as engine:
        result = await engine.evaluate(STARTING, depth=8)
    assert result.best_move is not None
    assert result.pv[0] == result.best_move
    if result.score_cp is not None:
        assert -100 < result.score_cp < 100

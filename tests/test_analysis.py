"""Tests for the board analysis helpers: geometry, rays, safety, material."""

import chess
import pytest

from puzzlecraft.analysis import (
    attacked_squares,
    control_mask,
    attackers_after_removal,
    controls,
    defenders_of,
    is_attacked,
    line_through,
    material_balance,
    piece_count,
)
from puzzlecraft.analysis.rays import Battery, Pin, Skewer, absolute_pins, find_ray_motifs
from puzzlecraft.analysis.safety import (
    can_be_taken_by_lower_piece,
    is_defended,
    is_hanging,
    is_in_bad_spot,
    is_trapped,
)


# ---------------------------------------------------------------------------
# Test positions (FEN)
# ---------------------------------------------------------------------------

STARTING = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
PAWNS_FACING = "4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1"
DOUBLED_ROOKS = "4k3/8/8/3p4/8/8/3R4/3R2K1 w - - 0 1"
LONE_ROOK = "4k3/8/8/8/8/8/8/R6K w - - 0 1"
KR_VS_K = "8/8/8/4k3/8/8/8/R3K3 w - - 0 1"
HANGING_QUEEN = "4k3/8/8/5n2/3Q4/8/8/4K3 w - - 0 1"


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


class TestControls:
    def test_pawn_controls_diagonals_toward_the_enemy(self):
        board = chess.Board(PAWNS_FACING)
        assert controls(board, chess.E4, chess.D5)
        assert controls(board, chess.E4, chess.F5)
        assert controls(board, chess.D5, chess.E4)
        assert controls(board, chess.D5, chess.C4)

    def test_pawn_never_controls_backwards_or_ahead(self):
        board = chess.Board(PAWNS_FACING)
        assert not controls(board, chess.E4, chess.D3)
        assert not controls(board, chess.E4, chess.E5)
        assert not controls(board, chess.D5, chess.C6)
        assert not controls(board, chess.D5, chess.D4)

    def test_slider_stops_at_first_piece(self):
        board = chess.Board(DOUBLED_ROOKS)
        assert controls(board, chess.D2, chess.D5)
        assert not controls(board, chess.D2, chess.D6)
        # d1 sees its own rook on d2 and nothing beyond
        assert controls(board, chess.D1, chess.D2)
        assert not controls(board, chess.D1, chess.D3)

    def test_control_is_not_symmetric(self):
        board = chess.Board(DOUBLED_ROOKS)
        assert controls(board, chess.D2, chess.D5)
        assert not controls(board, chess.D5, chess.D2)

    @pytest.mark.parametrize("fen", [
        STARTING,
        DOUBLED_ROOKS,
        "r1bq1rk1/pp2bppp/2n1pn2/3p4/2PP4/2N1PN2/PP1B1PPP/R2QKB1R w KQ - 0 8",
        "2r3k1/5ppp/p3b3/1p1Np3/4P3/1P3P2/P5PP/3R2K1 b - - 0 27",
    ])
    def test_control_mask_matches_board_attacks(self, fen):
        board = chess.Board(fen)
        for sq in chess.SquareSet(board.occupied):
            assert chess.SquareSet(control_mask(board, sq)) == board.attacks(sq)

    def test_empty_square_controls_nothing(self):
        board = chess.Board(PAWNS_FACING)
        assert not controls(board, chess.E5, chess.D6)

    def test_square_does_not_control_itself(self):
        board = chess.Board(PAWNS_FACING)
        assert not controls(board, chess.E4, chess.E4)


def test_defenders_include_same_color_pieces():
    board = chess.Board(DOUBLED_ROOKS)
    assert defenders_of(board, chess.D2, chess.WHITE) == chess.SquareSet([chess.D1])
    assert defenders_of(board, chess.D5, chess.WHITE) == chess.SquareSet([chess.D2])
    start = chess.Board(STARTING)
    assert defenders_of(start, chess.D2, chess.WHITE) == chess.SquareSet([chess.B1, chess.C1, chess.D1, chess.E1])


def test_attacked_squares_include_defended_friendly_squares():
    """Rook a1 covers the a-file and rank 1 up to its own king on h1."""
    board = chess.Board(LONE_ROOK)
    squares = attacked_squares(board, chess.WHITE)
    assert len(squares) == 16
    assert chess.H1 in squares
    assert chess.B2 not in squares


def test_is_attacked():
    board = chess.Board(PAWNS_FACING)
    assert is_attacked(board, chess.D5)
    assert is_attacked(board, chess.E4)
    assert not is_attacked(board, chess.E1)
    # Empty squares are never "attacked"
    assert not is_attacked(board, chess.E5)


def test_attackers_after_removal_reveal_x_ray():
    board = chess.Board(DOUBLED_ROOKS)
    assert attackers_after_removal(board, chess.D5, chess.WHITE, [chess.D2]) == chess.SquareSet([chess.D1])
    # The board itself is untouched
    assert board.piece_at(chess.D2) == chess.Piece(chess.ROOK, chess.WHITE)


def test_line_through():
    assert line_through(chess.A1, chess.D4) == chess.SquareSet([chess.B2, chess.C3])
    assert line_through(chess.D1, chess.D5) == chess.SquareSet([chess.D2, chess.D3, chess.D4])
    assert not line_through(chess.A1, chess.B3)


# ---------------------------------------------------------------------------
# Rays
# ---------------------------------------------------------------------------


def test_absolute_pin_found():
    board = chess.Board("4k3/4n3/8/8/8/8/8/4R1K1 w - - 0 1")
    assert absolute_pins(board, chess.WHITE) == [Pin(chess.E1, chess.E7, chess.E8)]


def test_pinned_pawn_below_min_value():
    board = chess.Board("4k3/4p3/8/8/8/8/8/4R1K1 w - - 0 1")
    assert find_ray_motifs(board, chess.WHITE).pins == [Pin(chess.E1, chess.E7, chess.E8)]
    assert absolute_pins(board, chess.WHITE) == []


def test_skewer_king_in_front_of_queen():
    board = chess.Board("8/8/8/8/R2k3q/8/8/6K1 b - - 0 1")
    motifs = find_ray_motifs(board, chess.WHITE)
    assert motifs.skewers == [Skewer(chess.A4, chess.D4, chess.H4)]
    assert motifs.pins == []


def test_battery_on_a_file():
    board = chess.Board("4k3/8/8/8/8/8/4Q3/4R1K1 w - - 0 1")
    assert find_ray_motifs(board, chess.WHITE).batteries == [Battery(chess.E1, chess.E2, chess.E8)]


# ---------------------------------------------------------------------------
# Safety
# ---------------------------------------------------------------------------


class TestSafety:
    def test_defended_through_attacking_slider(self):
        """Rook d6 attacks Rd4, but Qd8 recaptures once Rd6 takes."""
        board = chess.Board("3Q4/8/3r4/8/3R4/8/8/k5K1 w - - 0 1")
        assert is_defended(board, chess.D4)
        assert not is_in_bad_spot(board, chess.D4)

    def test_undefended_attacked_piece_is_in_bad_spot(self):
        board = chess.Board("8/8/3r4/8/3R4/8/8/k5K1 w - - 0 1")
        assert is_hanging(board, chess.D4)
        assert is_in_bad_spot(board, chess.D4)

    def test_queen_attacked_by_knight(self):
        board = chess.Board(HANGING_QUEEN)
        assert can_be_taken_by_lower_piece(board, chess.D4)
        assert not can_be_taken_by_lower_piece(board, chess.F5)

    def test_trapped_bishop(self):
        """Ba7 is attacked by the king; its only move Bxb6 runs into c7xb6."""
        board = chess.Board("1k6/B1p5/1p6/8/8/8/8/4K3 w - - 0 1")
        assert is_trapped(board, chess.A7)

    def test_bishop_with_escape_is_not_trapped(self):
        board = chess.Board("1k6/B7/8/8/8/8/8/4K3 w - - 0 1")
        assert not is_trapped(board, chess.A7)

    def test_trapped_needs_the_piece_side_to_move(self):
        board = chess.Board("1k6/B1p5/1p6/8/8/8/8/4K3 b - - 0 1")
        assert not is_trapped(board, chess.A7)


# ---------------------------------------------------------------------------
# Material
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("fen,expected", [
    (STARTING, 14),
    (KR_VS_K, 1),
    ("4k3/8/8/8/8/8/8/4K3 w - - 0 1", 0),
])
def test_piece_count(fen, expected):
    assert piece_count(chess.Board(fen)) == expected


def test_material_balance_is_color_relative():
    board = chess.Board(KR_VS_K)
    assert material_balance(board, chess.WHITE) == 5
    assert material_balance(board, chess.BLACK) == -5
    assert material_balance(chess.Board(STARTING), chess.WHITE) == 0

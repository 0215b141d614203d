"""Tests for classifier configuration."""

import pytest
from pydantic import ValidationError

from puzzlecraft.config import ClassifierSettings, get_settings


class TestClassifierSettings:
    def test_defaults(self):
        s = ClassifierSettings(_env_file=None)
        assert s.holdable_floor_cp == -500
        assert s.holdable_floor_endgame_cp == -300
        assert s.endgame_piece_threshold == 7
        assert s.opening_max_ply == 24
        assert s.survival_ceiling_cp == 50
        assert s.material_threat_min_cp == 100
        assert s.severity_blunder_cp == 300
        assert s.pv_max_plies == 12
        assert s.mate_eval_threshold_cp == 9000
        assert s.forced_legal_move_ceiling == 5

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PUZZLECRAFT_OPENING_MAX_PLY", "30")
        monkeypatch.setenv("PUZZLECRAFT_HOLDABLE_FLOOR_CP", "-400")
        s = ClassifierSettings(_env_file=None)
        assert s.opening_max_ply == 30
        assert s.holdable_floor_cp == -400

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("OPENING_MAX_PLY", "99")
        s = ClassifierSettings(_env_file=None)
        assert s.opening_max_ply == 24

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env.puzzlecraft"
        env.write_text("PUZZLECRAFT_SURVIVAL_CEILING_CP=80\n")
        s = ClassifierSettings(_env_file=env)
        assert s.survival_ceiling_cp == 80

    @pytest.mark.parametrize("field,value", [
        ("pv_max_plies", 0),
        ("motif_pv_plies", 0),
        ("material_threat_min_cp", 0),
        ("endgame_piece_threshold", -1),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            ClassifierSettings(_env_file=None, **{field: value})

    def test_non_integer_env_rejected(self, monkeypatch):
        monkeypatch.setenv("PUZZLECRAFT_PV_MAX_PLIES", "lots")
        with pytest.raises(ValidationError):
            ClassifierSettings(_env_file=None)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()

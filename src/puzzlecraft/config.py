"""Classifier thresholds.

Every tuned cutoff lives here rather than in the classifiers, so a corpus
run can retune them from the environment (PUZZLECRAFT_* variables) or a
.env.puzzlecraft file without code changes.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClassifierSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PUZZLECRAFT_",
        env_file=".env.puzzlecraft",
        env_file_encoding="utf-8",
    )

    # Category: holdability filter (mover perspective, centipawns)
    holdable_floor_cp: int = -500
    holdable_floor_endgame_cp: int = -300
    endgame_piece_threshold: int = Field(7, ge=0)  # knights+bishops+rooks+queens, both sides
    opening_max_ply: int = Field(24, ge=0)

    # Category: defending / attacking
    survival_ceiling_cp: int = 50
    material_threat_min_cp: int = Field(100, gt=0)

    # Severity
    severity_blunder_cp: int = 300
    severity_decisive_eval_cp: int = 200
    severity_missed_cp: int = 200

    # PV forcing-sequence analysis
    pv_max_plies: int = Field(12, ge=1)
    mate_eval_threshold_cp: int = 9000
    forced_legal_move_ceiling: int = Field(5, ge=0)

    # Motif detection
    motif_pv_plies: int = Field(8, ge=1)
    mate_threat_max_replies: int = Field(5, ge=1)


@lru_cache
def get_settings() -> ClassifierSettings:
    """Process-wide settings, read once."""
    return ClassifierSettings()

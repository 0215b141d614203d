"""Chess puzzle classification: category, severity, motif labels and forced-line length."""

from puzzlecraft.classifier import analyze_pv, classify_puzzle
from puzzlecraft.types import (
    Category,
    Classification,
    ClassificationContext,
    Label,
    Position,
    PvAnalysis,
    Severity,
)

__all__ = [
    "analyze_pv",
    "classify_puzzle",
    "Category",
    "Classification",
    "ClassificationContext",
    "Label",
    "Position",
    "PvAnalysis",
    "Severity",
]

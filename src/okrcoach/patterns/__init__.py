"""Anti-pattern detection and reframing."""

from .detector import AntiPatternDetector, text_quality_score, fill_placeholders
from .models import (
    AntiPatternType,
    AntiPatternFinding,
    DetectionResult,
    ReframingSuggestion,
    ReframingEvaluation,
    Dependency,
    Severity,
    InterventionType,
    Technique,
)

__all__ = [
    "AntiPatternDetector",
    "text_quality_score",
    "fill_placeholders",
    "AntiPatternType",
    "AntiPatternFinding",
    "DetectionResult",
    "ReframingSuggestion",
    "ReframingEvaluation",
    "Dependency",
    "Severity",
    "InterventionType",
    "Technique",
]

"""OKR quality scoring."""

from .scorer import QualityScorer
from .models import (
    ObjectiveScore,
    KeyResultScore,
    OverallScore,
    QualityScores,
    OKRAssessment,
    level_for_score,
)
from .scope import ScopeIndicators, analyze_scope_indicators

__all__ = [
    "QualityScorer",
    "ObjectiveScore",
    "KeyResultScore",
    "OverallScore",
    "QualityScores",
    "OKRAssessment",
    "level_for_score",
    "ScopeIndicators",
    "analyze_scope_indicators",
]

"""Data models for OKR quality scoring."""

from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from okrcoach.domain.models import QualityLevel

LEVEL_RULES = [
    (QualityLevel.EXCELLENT,  90),
    (QualityLevel.GOOD,       75),
    (QualityLevel.ACCEPTABLE, 60),
    (QualityLevel.NEEDS_WORK, 40),
]


def level_for_score(score: float) -> QualityLevel:
    """Map a 0..100 score to its quality level."""
    for level, thr in LEVEL_RULES:
        if score >= thr:
            return level
    return QualityLevel.POOR


@dataclass(frozen=True)
class ObjectiveDimensions:
    outcome_orientation: int = 0
    inspiration: int = 0
    clarity: int = 0
    alignment: int = 0
    ambition: int = 0
    scope_appropriateness: int = 0


@dataclass(frozen=True)
class KeyResultDimensions:
    quantification: int = 0
    outcome_vs_activity: int = 0
    feasibility: int = 0
    independence: int = 0
    challenge: int = 0


def _score_dict(score) -> Dict[str, Any]:
    return {
        "overall": score.overall,
        "level": score.level.value,
        "dimensions": asdict(score.dimensions),
        "feedback": list(score.feedback),
        "improvements": list(score.improvements),
        "contributors": {k: dict(v) for k, v in score.contributors.items()},
    }


def _dimensions_from(cls, data: Mapping[str, Any]):
    names = {f.name for f in fields(cls)}
    return cls(**{k: int(v) for k, v in (data or {}).items() if k in names})


@dataclass(frozen=True)
class ObjectiveScore:
    overall: int                                   # 0..100
    dimensions: ObjectiveDimensions
    feedback: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()
    level: QualityLevel = QualityLevel.POOR
    # dimension -> rule -> points; informational, excluded from equality
    contributors: Dict[str, Dict[str, float]] = field(default_factory=dict, compare=False)

    def as_dict(self) -> Dict[str, Any]:
        return _score_dict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ObjectiveScore":
        return cls(
            overall=int(data["overall"]),
            dimensions=_dimensions_from(ObjectiveDimensions, data.get("dimensions")),
            feedback=tuple(data.get("feedback", ())),
            improvements=tuple(data.get("improvements", ())),
            level=QualityLevel(data.get("level", level_for_score(int(data["overall"])).value)),
            contributors=dict(data.get("contributors", {})),
        )


@dataclass(frozen=True)
class KeyResultScore:
    overall: int
    dimensions: KeyResultDimensions
    feedback: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()
    level: QualityLevel = QualityLevel.POOR
    contributors: Dict[str, Dict[str, float]] = field(default_factory=dict, compare=False)

    def as_dict(self) -> Dict[str, Any]:
        return _score_dict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeyResultScore":
        return cls(
            overall=int(data["overall"]),
            dimensions=_dimensions_from(KeyResultDimensions, data.get("dimensions")),
            feedback=tuple(data.get("feedback", ())),
            improvements=tuple(data.get("improvements", ())),
            level=QualityLevel(data.get("level", level_for_score(int(data["overall"])).value)),
            contributors=dict(data.get("contributors", {})),
        )


@dataclass(frozen=True)
class OverallScore:
    score: int
    coherence: int
    completeness: int
    balance: int
    achievability: int
    level: QualityLevel = QualityLevel.POOR

    def as_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["level"] = self.level.value
        return d


@dataclass(frozen=True)
class QualityScores:
    """Latest scores for a session, as handed to the validator and controller."""
    objective: Optional[ObjectiveScore] = None
    key_results: Tuple[KeyResultScore, ...] = ()
    overall: Optional[OverallScore] = None

    @property
    def mean_key_result_score(self) -> Optional[float]:
        if not self.key_results:
            return None
        return float(np.mean([kr.overall for kr in self.key_results]))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "objective": self.objective.as_dict() if self.objective else None,
            "key_results": [kr.as_dict() for kr in self.key_results],
            "overall": self.overall.as_dict() if self.overall else None,
        }


@dataclass(frozen=True)
class OKRAssessment:
    """Everything the scorer knows about one objective and its key results."""
    objective_text: str
    key_result_texts: Tuple[str, ...]
    objective: ObjectiveScore
    key_results: Tuple[KeyResultScore, ...]
    overall: OverallScore

    def quality_scores(self) -> QualityScores:
        return QualityScores(objective=self.objective, key_results=self.key_results, overall=self.overall)

"""Data models for anti-pattern detection and reframing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class AntiPatternType(Enum):
    ACTIVITY_FOCUSED = "activity_focused"
    BINARY_THINKING = "binary_thinking"
    VANITY_METRICS = "vanity_metrics"
    BUSINESS_AS_USUAL = "business_as_usual"
    KITCHEN_SINK = "kitchen_sink"
    VAGUE_OUTCOME = "vague_outcome"


class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def confidence_boost(self) -> float:
        return _SEVERITY_BOOST[self]


_SEVERITY_RANK = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3, Severity.CRITICAL: 4}
_SEVERITY_BOOST = {Severity.LOW: 0.0, Severity.MEDIUM: 0.05, Severity.HIGH: 0.10, Severity.CRITICAL: 0.15}


class InterventionType(Enum):
    ACTIVITY_TO_OUTCOME = "activity_to_outcome"
    METRIC_EDUCATION = "metric_education"
    AMBITION_CALIBRATION = "ambition_calibration"
    CLARITY_IMPROVEMENT = "clarity_improvement"


class Technique(Enum):
    FIVE_WHYS = "five_whys"
    OUTCOME_TRANSFORMATION = "outcome_transformation"
    VALUE_EXPLORATION = "value_exploration"
    EXAMPLE_DRIVEN = "example_driven"
    QUESTION_CASCADE = "question_cascade"


@dataclass(frozen=True)
class ReframingExample:
    before: str
    after: str
    context: str
    explanation: str


@dataclass(frozen=True)
class ReframingStrategy:
    name: str
    technique: Technique
    questions: Tuple[str, ...]
    examples: Tuple[ReframingExample, ...]
    success_criteria: Tuple[str, ...]
    max_attempts: int


@dataclass(frozen=True)
class AntiPatternFinding:
    type: AntiPatternType
    name: str
    description: str
    confidence: float                      # 0..1
    severity: Severity
    intervention_type: InterventionType
    strategy: ReframingStrategy = field(compare=False, repr=False)
    evidence: Dict[str, int] = field(default_factory=dict, compare=False)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "description": self.description,
            "confidence": round(self.confidence, 4),
            "severity": self.severity.value,
            "intervention_type": self.intervention_type.value,
            "technique": self.strategy.technique.value,
            "evidence": dict(self.evidence),
        }


@dataclass(frozen=True)
class DetectionResult:
    patterns: Tuple[AntiPatternFinding, ...] = ()

    @property
    def detected(self) -> bool:
        return bool(self.patterns)

    @property
    def severity(self) -> Severity:
        if not self.patterns:
            return Severity.LOW
        return max((p.severity for p in self.patterns), key=lambda s: s.rank)

    @property
    def confidence(self) -> float:
        if not self.patterns:
            return 0.0
        return sum(p.confidence for p in self.patterns) / len(self.patterns)

    @property
    def suggested_interventions(self) -> Tuple[InterventionType, ...]:
        return tuple(dict.fromkeys(p.intervention_type for p in self.patterns))

    def finding(self, pattern_type: AntiPatternType) -> Optional[AntiPatternFinding]:
        for p in self.patterns:
            if p.type == pattern_type:
                return p
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "detected": self.detected,
            "severity": self.severity.value,
            "confidence": round(self.confidence, 4),
            "suggested_interventions": [i.value for i in self.suggested_interventions],
            "patterns": [p.as_dict() for p in self.patterns],
        }


@dataclass(frozen=True)
class ReframingSuggestion:
    pattern_type: AntiPatternType
    technique: Technique
    strategy_name: str
    question: str
    suggestion: str
    examples: Tuple[ReframingExample, ...]
    follow_up_questions: Tuple[str, ...]
    expected_outcome: str
    previous_attempts: int
    confidence: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "pattern_type": self.pattern_type.value,
            "technique": self.technique.value,
            "strategy_name": self.strategy_name,
            "question": self.question,
            "suggestion": self.suggestion,
            "examples": [e.__dict__.copy() for e in self.examples],
            "follow_up_questions": list(self.follow_up_questions),
            "expected_outcome": self.expected_outcome,
            "previous_attempts": self.previous_attempts,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class Dependency:
    type: str                 # customer_behavior | other_team | market_dynamics | external_factor
    description: str
    controllability: str      # full | high | medium | low | none


@dataclass(frozen=True)
class ReframingEvaluation:
    success: bool
    before_score: int
    after_score: int
    before_confidence: float
    after_confidence: float
    intervention_type: InterventionType

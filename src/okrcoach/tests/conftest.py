import pytest

from okrcoach.domain.models import Phase, SessionSnapshot
from okrcoach.patterns import AntiPatternDetector
from okrcoach.scoring import QualityScorer
from okrcoach.scoring.models import (
    KeyResultDimensions,
    KeyResultScore,
    ObjectiveDimensions,
    ObjectiveScore,
    OverallScore,
    QualityScores,
    level_for_score,
)
from okrcoach.transitions import TransitionValidator


@pytest.fixture
def scorer():
    return QualityScorer()


@pytest.fixture
def detector():
    return AntiPatternDetector()


@pytest.fixture
def validator():
    return TransitionValidator()


def objective_score(overall: int, **dims) -> ObjectiveScore:
    return ObjectiveScore(
        overall=overall,
        dimensions=ObjectiveDimensions(**dims),
        level=level_for_score(overall),
    )


def key_result_score(overall: int, **dims) -> KeyResultScore:
    return KeyResultScore(
        overall=overall,
        dimensions=KeyResultDimensions(**dims),
        level=level_for_score(overall),
    )


def overall_score(score: int) -> OverallScore:
    return OverallScore(
        score=score, coherence=50, completeness=80, balance=70, achievability=80,
        level=level_for_score(score),
    )


@pytest.fixture
def make_scores():
    """Build QualityScores from plain numbers."""
    def _make(objective=None, key_results=(), overall=None):
        return QualityScores(
            objective=objective_score(objective) if objective is not None else None,
            key_results=tuple(key_result_score(s) for s in key_results),
            overall=overall_score(overall) if overall is not None else None,
        )
    return _make


@pytest.fixture
def make_session():
    """Build a SessionSnapshot with sensible defaults for the phase."""
    def _make(phase=Phase.DISCOVERY, **kwargs):
        kwargs.setdefault("session_id", "s-1")
        return SessionSnapshot(phase=Phase.parse(phase), **kwargs)
    return _make

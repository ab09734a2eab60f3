"""Wiring: build the coaching components from Settings."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from okrcoach.config.resolvers import resolve_cache_path
from okrcoach.config.settings import CacheBackend, Settings
from okrcoach.controller import (
    NoTimeoutPolicy, PhaseController, PhaseReadiness, TimeoutPolicy, TurnLimitTimeoutPolicy,
)
from okrcoach.data.score_cache import (
    MemoryScoreCache, NullScoreCache, ScoreCache, SqliteScoreCache,
)
from okrcoach.domain.models import ConversationStrategy, ObjectiveScope, SessionSnapshot
from okrcoach.patterns import AntiPatternDetector, DetectionResult, ReframingSuggestion
from okrcoach.scoring import QualityScorer
from okrcoach.scoring.models import OKRAssessment, QualityScores
from okrcoach.transitions import TransitionValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnAssessment:
    """Everything the engine concludes about one conversation turn."""
    scope: ObjectiveScope
    assessment: OKRAssessment
    quality_scores: QualityScores
    detection: DetectionResult
    reframing: Optional[ReframingSuggestion]
    readiness: PhaseReadiness
    strategy: ConversationStrategy

    def as_dict(self) -> Dict[str, Any]:
        return {
            "scope": self.scope.value,
            "quality_scores": self.quality_scores.as_dict(),
            "detection": self.detection.as_dict(),
            "reframing": self.reframing.as_dict() if self.reframing else None,
            "readiness": self.readiness.as_dict(),
            "strategy": self.strategy.value,
        }


@dataclass
class CoachingEngine:
    cache: ScoreCache
    scorer: QualityScorer
    detector: AntiPatternDetector
    validator: TransitionValidator
    controller: PhaseController

    def assess_turn(self, session: SessionSnapshot, ai_text: str = "") -> TurnAssessment:
        """Score, detect, then decide readiness and strategy for the session's current state."""
        objective = session.objective if session.has_objective else ""
        scope = self.controller.detect_objective_scope(objective, session.context)
        assessment = self.scorer.score_okr_set(objective, session.key_results, session.context, scope)
        detection = self.detector.detect_patterns(objective, session.context)
        reframing = self.detector.generate_reframing_response(
            detection, objective, session.profile, session.context
        )
        scores = session_quality_scores(session, assessment)
        readiness = self.controller.evaluate_phase_readiness(session, scores, ai_text)
        strategy = self.controller.determine_conversation_strategy(session)
        return TurnAssessment(
            scope=scope,
            assessment=assessment,
            quality_scores=scores,
            detection=detection,
            reframing=reframing,
            readiness=readiness,
            strategy=strategy,
        )

    def score_session(self, session: SessionSnapshot) -> QualityScores:
        """Quality scores for whatever the session has extracted so far."""
        objective = session.objective if session.has_objective else ""
        scope = self.controller.detect_objective_scope(objective, session.context)
        assessment = self.scorer.score_okr_set(objective, session.key_results, session.context, scope)
        return session_quality_scores(session, assessment)

    def close(self) -> None:
        self.cache.close()


def session_quality_scores(session: SessionSnapshot, assessment: OKRAssessment) -> QualityScores:
    """Only report scores for artefacts the session actually holds."""
    return QualityScores(
        objective=assessment.objective if session.has_objective else None,
        key_results=assessment.key_results,
        overall=assessment.overall if session.has_objective and session.key_results else None,
    )


def build_cache(settings: Settings) -> ScoreCache:
    cfg = settings.cache
    if cfg.backend is CacheBackend.NONE:
        return NullScoreCache()
    if cfg.backend is CacheBackend.SQLITE:
        path = resolve_cache_path(fresh=cfg.fresh, cache_path=cfg.path)
        logger.info("Using SQLite score cache at %s", path)
        return SqliteScoreCache(path, ttl_seconds=cfg.ttl_seconds)
    return MemoryScoreCache(ttl_seconds=cfg.ttl_seconds, max_entries=cfg.max_entries)


def build_timeout_policy(settings: Settings) -> TimeoutPolicy:
    if not settings.phases.timeouts_enabled:
        return NoTimeoutPolicy()
    return TurnLimitTimeoutPolicy(settings.phases.timeout_turns)


def build_engine(settings: Optional[Settings] = None) -> CoachingEngine:
    """Construct a CoachingEngine; defaults apply when no settings are given."""
    settings = settings or Settings()
    cache = build_cache(settings)
    validator = TransitionValidator()
    engine = CoachingEngine(
        cache=cache,
        scorer=QualityScorer(cache=cache),
        detector=AntiPatternDetector(
            detection_threshold=settings.detection.detection_threshold,
            activation_threshold=settings.detection.activation_threshold,
        ),
        validator=validator,
        controller=PhaseController(validator=validator, timeout_policy=build_timeout_policy(settings)),
    )
    logger.debug(
        "Engine built: cache=%s timeout=%s",
        type(cache).__name__, engine.controller.timeout_policy.describe(),
    )
    return engine

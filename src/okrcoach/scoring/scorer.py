"""Quality scoring for objectives, key results and whole OKR sets."""

import logging
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from okrcoach.data.score_cache import (
    ScoreCache, NullScoreCache, fingerprint, OBJECTIVE, KEY_RESULT,
)
from okrcoach.domain.exceptions import CacheError
from okrcoach.domain.models import ObjectiveScope, UserContext
from okrcoach.utils.text import analysed_text
from okrcoach.utils.timing import timeit

from .feedback import (
    OBJECTIVE_FEEDBACK, OBJECTIVE_IMPROVEMENTS,
    KEY_RESULT_FEEDBACK, KEY_RESULT_IMPROVEMENTS, messages_for,
)
from .key_result_rules import KEY_RESULT_DIMENSIONS
from .models import (
    ObjectiveScore, KeyResultScore, OverallScore, OKRAssessment,
    ObjectiveDimensions, KeyResultDimensions, level_for_score,
)
from .objective_rules import OBJECTIVE_DIMENSIONS
from .okr_set import score_coherence, score_completeness, score_balance, score_achievability
from .rules import RuleContext, round_half_up, clamp_score
from .scope import analyze_scope_indicators

logger = logging.getLogger(__name__)

OVERALL_WEIGHTS = {
    "objective": 0.4,
    "key_results": 0.4,
    "coherence": 0.1,
    "completeness": 0.05,
    "balance": 0.025,
    "achievability": 0.025,
}


def _as_text(value) -> str:
    return analysed_text(value)


def _evaluate(dimensions, text: str, ctx: RuleContext) -> Tuple[Dict[str, int], Dict[str, Dict[str, float]], int]:
    scores: Dict[str, int] = {}
    contributors: Dict[str, Dict[str, float]] = {}
    weighted = 0.0
    for dimension, weight in dimensions:
        result = dimension.evaluate(text, ctx)
        scores[dimension.name] = result.score
        contributors[dimension.name] = result.contributions
        weighted += result.score * weight
    return scores, contributors, clamp_score(round_half_up(weighted))


def unscored_objective() -> ObjectiveScore:
    return ObjectiveScore(
        overall=0,
        dimensions=ObjectiveDimensions(),
        feedback=("Unable to score this objective. Please try again.",),
    )


def unscored_key_result() -> KeyResultScore:
    return KeyResultScore(
        overall=0,
        dimensions=KeyResultDimensions(),
        feedback=("Unable to score this key result. Please try again.",),
    )


class QualityScorer:
    """Deterministic rule-based scorer. Every method is total: any string scores."""

    def __init__(self, cache: Optional[ScoreCache] = None):
        self.cache = cache if cache is not None else NullScoreCache()

    # ---- objectives ----

    def score_objective(
        self,
        objective: str,
        context: Optional[UserContext] = None,
        scope: ObjectiveScope = ObjectiveScope.TEAM,
    ) -> ObjectiveScore:
        text = _as_text(objective)
        context = context or UserContext()
        scope = ObjectiveScope.parse(scope, default=ObjectiveScope.TEAM)

        key = fingerprint(OBJECTIVE, text, context, scope)
        cached = self._cache_get(OBJECTIVE, key)
        if cached is not None:
            return cached

        try:
            ctx = RuleContext(
                context=context,
                scope=scope,
                indicators=analyze_scope_indicators(text, context),
            )
            scores, contributors, overall = _evaluate(OBJECTIVE_DIMENSIONS, text, ctx)
            dimensions = ObjectiveDimensions(**scores)
            score = ObjectiveScore(
                overall=overall,
                dimensions=dimensions,
                feedback=messages_for(dimensions, OBJECTIVE_FEEDBACK),
                improvements=messages_for(dimensions, OBJECTIVE_IMPROVEMENTS),
                level=level_for_score(overall),
                contributors=contributors,
            )
        except Exception:
            logger.exception("Error scoring objective: %r", text[:120])
            return unscored_objective()

        logger.debug("Objective scored: overall=%d dimensions=%s", overall, scores)
        self._cache_set(OBJECTIVE, key, score)
        return score

    # ---- key results ----

    def score_key_result(self, key_result: str, context: Optional[UserContext] = None) -> KeyResultScore:
        text = _as_text(key_result)
        context = context or UserContext()

        key = fingerprint(KEY_RESULT, text, context)
        cached = self._cache_get(KEY_RESULT, key)
        if cached is not None:
            return cached

        try:
            scores, contributors, overall = _evaluate(
                KEY_RESULT_DIMENSIONS, text, RuleContext(context=context)
            )
            dimensions = KeyResultDimensions(**scores)
            score = KeyResultScore(
                overall=overall,
                dimensions=dimensions,
                feedback=messages_for(dimensions, KEY_RESULT_FEEDBACK),
                improvements=messages_for(dimensions, KEY_RESULT_IMPROVEMENTS),
                level=level_for_score(overall),
                contributors=contributors,
            )
        except Exception:
            logger.exception("Error scoring key result: %r", text[:120])
            return unscored_key_result()

        logger.debug("Key result scored: overall=%d dimensions=%s", overall, scores)
        self._cache_set(KEY_RESULT, key, score)
        return score

    # ---- OKR sets ----

    def score_overall(
        self,
        objective_score: ObjectiveScore,
        key_result_scores: Sequence[KeyResultScore],
        objective: str,
        key_results: Sequence[str],
    ) -> OverallScore:
        """Blend objective, key-result and set-level measures into one score."""
        objective_text = _as_text(objective)
        kr_texts = [_as_text(kr) for kr in key_results]

        coherence = score_coherence(objective_text, kr_texts)
        completeness = score_completeness(kr_texts)
        balance = score_balance(kr_texts)
        achievability = score_achievability(
            objective_score.dimensions.ambition,
            [kr.dimensions.challenge for kr in key_result_scores],
        )
        mean_kr = float(np.mean([kr.overall for kr in key_result_scores])) if key_result_scores else 0.0

        w = OVERALL_WEIGHTS
        score = clamp_score(round_half_up(
            objective_score.overall * w["objective"]
            + mean_kr * w["key_results"]
            + coherence * w["coherence"]
            + completeness * w["completeness"]
            + balance * w["balance"]
            + achievability * w["achievability"]
        ))
        return OverallScore(
            score=score,
            coherence=coherence,
            completeness=completeness,
            balance=balance,
            achievability=achievability,
            level=level_for_score(score),
        )

    @timeit(logger, name="QualityScorer.score_okr_set", level=logging.DEBUG)
    def score_okr_set(
        self,
        objective: str,
        key_results: Sequence[str],
        context: Optional[UserContext] = None,
        scope: ObjectiveScope = ObjectiveScope.TEAM,
    ) -> OKRAssessment:
        """Score an objective, each key result and the set in one call."""
        objective_text = _as_text(objective)
        kr_texts = tuple(_as_text(kr) for kr in (key_results or ()))
        objective_score = self.score_objective(objective_text, context, scope)
        kr_scores = tuple(self.score_key_result(kr, context) for kr in kr_texts)
        overall = self.score_overall(objective_score, kr_scores, objective_text, kr_texts)
        return OKRAssessment(
            objective_text=objective_text,
            key_result_texts=kr_texts,
            objective=objective_score,
            key_results=kr_scores,
            overall=overall,
        )

    # ---- cache plumbing ----

    def _cache_get(self, kind: str, key: str):
        try:
            return self.cache.get(kind, key)
        except CacheError as e:
            logger.warning("Score cache read failed, recomputing: %s", e.message)
            return None

    def _cache_set(self, kind: str, key: str, score) -> None:
        try:
            self.cache.set(kind, key, score)
        except CacheError as e:
            logger.warning("Score cache write failed: %s", e.message)

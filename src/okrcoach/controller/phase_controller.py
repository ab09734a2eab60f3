"""Per-turn orchestration: readiness, coaching strategy and objective scope."""

import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from okrcoach.domain.exceptions import InvalidPhaseError
from okrcoach.domain.models import (
    ConversationStrategy, ObjectiveScope, Phase, PhaseTransitionResult,
    SessionSnapshot, UserContext,
)
from okrcoach.scoring.models import QualityScores
from okrcoach.scoring.scope import analyze_scope_indicators
from okrcoach.transitions.phases import PHASE_METADATA, get_next_phase, is_terminal
from okrcoach.transitions.validator import TransitionValidator
from okrcoach.utils.text import analysed_text

from .signals import (
    FinalizationSignals, ResistanceSignals, analyze_resistance, detect_finalization,
)
from .timeout import NoTimeoutPolicy, TimeoutPolicy

logger = logging.getLogger(__name__)

READINESS_WEIGHTS = {"quality": 0.6, "turns": 0.25, "approval": 0.15}

EARLY_CONVERSATION_TURNS = 3
RESISTANCE_WINDOW = 5
NEGATION_DENSITY_THRESHOLD = 0.08
HEDGING_DENSITY_THRESHOLD = 0.05
LOW_ENGAGEMENT_WORDS = 6

STRATEGIC_KEYWORDS = ("company", "organization", "organisation", "business", "enterprise", "corporation")
DEPARTMENTAL_KEYWORDS = ("department", "division", "group", "function")
INITIATIVE_KEYWORDS = ("initiative", "program", "programme", "pilot")
INDIVIDUAL_KEYWORDS = ("my", "personal", "individual", "own")
EXECUTIVE_ROLES = ("ceo", "executive", "chief", "founder")
DEPARTMENT_HEAD_ROLES = ("vp", "vice president", "director", "head of")

TRANSITION_MESSAGES = {
    Phase.DISCOVERY: "Let's start by discovering what you want to achieve.",
    Phase.REFINEMENT: "Great! Now let's refine your objective to make it more outcome-oriented.",
    Phase.KR_DISCOVERY: "Excellent objective! Now let's create key results to measure your progress.",
    Phase.VALIDATION: "Let's review your complete OKR set to ensure it's ready.",
    Phase.COMPLETED: "Congratulations! Your OKR is complete and ready to use.",
}

PHASE_FOCUS = {
    Phase.DISCOVERY: "identifying meaningful business outcomes",
    Phase.REFINEMENT: "clarity and outcome orientation",
    Phase.KR_DISCOVERY: "measurable success indicators",
    Phase.VALIDATION: "final quality assessment",
    Phase.COMPLETED: "OKR implementation and tracking",
}

# minutes of conversation typically left in each phase
BASE_COMPLETION_MINUTES = {
    Phase.DISCOVERY: 15,
    Phase.REFINEMENT: 20,
    Phase.KR_DISCOVERY: 25,
    Phase.VALIDATION: 10,
    Phase.COMPLETED: 0,
}
LOW_QUALITY_THRESHOLD = 70
LOW_QUALITY_EXTRA_MINUTES = 10


def _keyword_pattern(words) -> "re.Pattern[str]":
    return re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b", re.I)


_STRATEGIC = _keyword_pattern(STRATEGIC_KEYWORDS)
_DEPARTMENTAL = _keyword_pattern(DEPARTMENTAL_KEYWORDS)
_INITIATIVE = _keyword_pattern(INITIATIVE_KEYWORDS)
_INDIVIDUAL = _keyword_pattern(INDIVIDUAL_KEYWORDS)
_EXECUTIVE = _keyword_pattern(EXECUTIVE_ROLES)
_DEPARTMENT_HEAD = _keyword_pattern(DEPARTMENT_HEAD_ROLES)


@dataclass(frozen=True)
class PhaseReadiness:
    current_phase: Optional[Phase]
    ready_to_transition: bool
    readiness_score: float                        # 0..1
    has_finalization_signal: bool = False
    reasons: Tuple[str, ...] = ()
    next_phase: Optional[Phase] = None
    forced_by_timeout: bool = False
    missing_elements: Tuple[str, ...] = ()
    recommended_next_actions: Tuple[str, ...] = ()
    validation: Optional[PhaseTransitionResult] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "current_phase": self.current_phase.value if self.current_phase else None,
            "ready_to_transition": self.ready_to_transition,
            "readiness_score": round(self.readiness_score, 4),
            "has_finalization_signal": self.has_finalization_signal,
            "reasons": list(self.reasons),
            "next_phase": self.next_phase.value if self.next_phase else None,
            "forced_by_timeout": self.forced_by_timeout,
            "missing_elements": list(self.missing_elements),
            "recommended_next_actions": list(self.recommended_next_actions),
            "validation": self.validation.as_dict() if self.validation else None,
        }


def _objective_quality(scores: QualityScores) -> float:
    return scores.objective.overall if scores.objective is not None else 0.0


def _phase_quality(phase: Phase, scores: QualityScores) -> float:
    """0..1 quality of the artefact the phase is working on."""
    if phase in (Phase.DISCOVERY, Phase.REFINEMENT):
        return _objective_quality(scores) / 100
    if phase is Phase.KR_DISCOVERY:
        return (scores.mean_key_result_score or 0.0) / 100
    if phase is Phase.VALIDATION:
        if scores.overall is not None:
            return scores.overall.score / 100
        return _objective_quality(scores) / 100
    return 1.0


def _missing_elements(phase: Phase, session: SessionSnapshot, scores: QualityScores) -> List[str]:
    missing: List[str] = []
    if phase in (Phase.DISCOVERY, Phase.REFINEMENT):
        if not session.has_objective:
            return ["Clear objective statement"]
        if scores.objective is None:
            return ["Objective quality assessment"]
        dims = scores.objective.dimensions
        bar = 60 if phase is Phase.DISCOVERY else 70
        if dims.outcome_orientation < bar:
            missing.append("Outcome-oriented phrasing (focus on results, not activities)")
        if dims.clarity < bar:
            missing.append("Clarity and specificity")
        if dims.inspiration < 60:
            missing.append("Inspiring language")
    elif phase is Phase.KR_DISCOVERY:
        if len(session.key_results) < 2:
            missing.append("At least 2 key results (recommended: 2-4)")
        weak = [kr for kr in scores.key_results if kr.overall < LOW_QUALITY_THRESHOLD]
        if weak:
            missing.append(f"{len(weak)} key result(s) need improvement")
    elif phase is Phase.VALIDATION:
        if scores.objective is None and scores.overall is None and not scores.key_results:
            missing.append("Complete OKR quality assessment")
    return missing


class PhaseController:
    """Combines scores, conversation signals and the validator into per-turn decisions."""

    def __init__(
        self,
        validator: Optional[TransitionValidator] = None,
        timeout_policy: Optional[TimeoutPolicy] = None,
    ):
        self.validator = validator or TransitionValidator()
        self.timeout_policy = timeout_policy or NoTimeoutPolicy()

    # ---- readiness ----

    def evaluate_phase_readiness(
        self,
        session: SessionSnapshot,
        quality_scores: Optional[QualityScores] = None,
        ai_text: str = "",
    ) -> PhaseReadiness:
        """Decide whether the session should move to its next phase.

        readiness_score blends phase quality, turn progress against the
        phase's minimum turns and explicit approval. A transition is proposed
        when the score clears the phase threshold after the minimum turns, on
        finalization language, or when the timeout policy fires; the validator
        must accept every proposal.
        """
        scores = quality_scores or QualityScores()
        try:
            phase = Phase.parse(session.phase)
        except InvalidPhaseError:
            logger.warning("Unknown phase %r for session %s", session.phase, session.session_id or "-")
            return PhaseReadiness(
                current_phase=None,
                ready_to_transition=False,
                readiness_score=0.0,
                reasons=(f"Unknown phase '{session.phase}'",),
            )
        if phase is not session.phase:
            session = replace(session, phase=phase)
        signals = detect_finalization(session.recent_user_messages, ai_text or "", session.turn_count)

        if is_terminal(phase):
            return PhaseReadiness(
                current_phase=phase,
                ready_to_transition=False,
                readiness_score=1.0,
                has_finalization_signal=signals.detected,
                reasons=("Completed phase is terminal",),
            )

        try:
            return self._evaluate(session, scores, ai_text or "", signals)
        except Exception:
            logger.exception("Readiness evaluation failed for session %s", session.session_id or "-")
            return PhaseReadiness(
                current_phase=phase,
                ready_to_transition=False,
                readiness_score=0.0,
                reasons=("Readiness could not be evaluated",),
            )

    def _evaluate(
        self,
        session: SessionSnapshot,
        scores: QualityScores,
        ai_text: str,
        signals: FinalizationSignals,
    ) -> PhaseReadiness:
        phase = session.phase
        config = PHASE_METADATA[phase]
        turns = session.turns_in_phase
        next_phase = get_next_phase(phase)

        quality = _phase_quality(phase, scores)
        turn_progress = 1.0 if config.min_messages <= 0 else min(1.0, turns / config.min_messages)
        approval = 1.0 if session.user_confirmed else signals.approval_strength
        readiness = (
            READINESS_WEIGHTS["quality"] * quality
            + READINESS_WEIGHTS["turns"] * turn_progress
            + READINESS_WEIGHTS["approval"] * approval
        )
        readiness = max(0.0, min(1.0, readiness))

        natural = turns >= config.min_messages and readiness >= config.quality_threshold
        explicit = signals.detected or session.user_confirmed
        forced = self.timeout_policy.should_force(phase, turns)

        reasons: List[str] = []
        if natural:
            reasons.append(
                f"Readiness {readiness:.2f} meets {phase.value} threshold {config.quality_threshold:.2f}"
            )
        elif turns < config.min_messages:
            reasons.append(f"Only {turns} of {config.min_messages} turns completed in {phase.value}")
        else:
            reasons.append(
                f"Readiness {readiness:.2f} below {phase.value} threshold {config.quality_threshold:.2f}"
            )
        if signals.strong:
            reasons.append("User asked to finalize")
        elif signals.late_conversation and signals.approvals:
            reasons.append("User approved the current draft")
        if signals.completion:
            reasons.append("Coaching text announced completion")
        if session.user_confirmed:
            reasons.append("User confirmed the OKR")
        if forced:
            reasons.append(f"Phase timeout reached after {turns} turns ({self.timeout_policy.describe()})")

        verdict: Optional[PhaseTransitionResult] = None
        ready = False
        if natural or explicit or forced:
            verdict = self.validator.validate_transition(phase, next_phase, session, scores)
            ready = verdict.valid
            if not ready:
                reasons.extend(verdict.errors)

        missing = _missing_elements(phase, session, scores)
        actions = (self.generate_phase_transition_message(next_phase),) if ready else tuple(missing)

        result = PhaseReadiness(
            current_phase=phase,
            ready_to_transition=ready,
            readiness_score=readiness,
            has_finalization_signal=signals.detected,
            reasons=tuple(reasons),
            next_phase=next_phase,
            forced_by_timeout=ready and forced and not (natural or explicit),
            missing_elements=tuple(missing),
            recommended_next_actions=actions,
            validation=verdict,
        )
        logger.debug(
            "Phase readiness session=%s phase=%s score=%.3f ready=%s",
            session.session_id or "-", phase.value, readiness, ready,
        )
        return result

    # ---- strategy ----

    @staticmethod
    def analyze_resistance(messages) -> ResistanceSignals:
        return analyze_resistance(list(messages or ())[-RESISTANCE_WINDOW:])

    def determine_conversation_strategy(self, session: SessionSnapshot) -> ConversationStrategy:
        """Pick a coaching posture from the user's recent messages and profile."""
        signals = self.analyze_resistance(session.recent_user_messages)
        resistant = (
            signals.negation_density >= NEGATION_DENSITY_THRESHOLD
            or signals.hedging_density >= HEDGING_DENSITY_THRESHOLD
        )
        style = session.profile.communication_style

        if resistant:
            strategy = ConversationStrategy.GENTLE_GUIDANCE
        elif session.turn_count < EARLY_CONVERSATION_TURNS:
            strategy = ConversationStrategy.DISCOVERY_EXPLORATION
        elif style == "direct":
            strategy = ConversationStrategy.DIRECT_COACHING
        elif style == "supportive" or session.profile.resistance_patterns:
            strategy = ConversationStrategy.GENTLE_GUIDANCE
        elif signals.message_count and signals.words_per_message < LOW_ENGAGEMENT_WORDS:
            strategy = ConversationStrategy.DISCOVERY_EXPLORATION
        else:
            strategy = ConversationStrategy.DIRECT_COACHING

        logger.debug(
            "Strategy %s for session %s (%s)",
            strategy.value, session.session_id or "-", signals.as_dict(),
        )
        return strategy

    # ---- scope ----

    def detect_objective_scope(self, text: str, context: Optional[UserContext] = None) -> ObjectiveScope:
        """Organisational level the objective addresses; defaults to team."""
        context = context or UserContext()
        text = analysed_text(text)
        indicators = analyze_scope_indicators(text, context)

        if _STRATEGIC.search(text) or indicators.is_market_positioning or indicators.sets_organizational_direction:
            return ObjectiveScope.STRATEGIC
        if _DEPARTMENTAL.search(text) or indicators.requires_multiple_departments:
            return ObjectiveScope.DEPARTMENTAL
        if _INITIATIVE.search(text):
            return ObjectiveScope.INITIATIVE
        if indicators.is_activity_disguised and not indicators.has_measurable_outcome:
            return ObjectiveScope.PROJECT
        if _INDIVIDUAL.search(text) or indicators.is_tactical_execution:
            return ObjectiveScope.TEAM

        role = context.function or ""
        if _EXECUTIVE.search(role):
            return ObjectiveScope.STRATEGIC
        if _DEPARTMENT_HEAD.search(role):
            return ObjectiveScope.DEPARTMENTAL
        return ObjectiveScope.TEAM

    # ---- progress ----

    def calculate_phase_progress(self, phase: Any, quality_scores: Optional[QualityScores] = None) -> float:
        scores = quality_scores or QualityScores()
        phase = Phase.parse(phase)
        if phase is Phase.DISCOVERY:
            return min(0.8, _objective_quality(scores) / 100) if scores.objective else 0.2
        if phase is Phase.REFINEMENT:
            return _objective_quality(scores) / 100
        if phase is Phase.KR_DISCOVERY:
            return (scores.mean_key_result_score or 0.0) / 100
        if phase is Phase.VALIDATION:
            return scores.overall.score / 100 if scores.overall else 0.0
        return 1.0

    def estimate_completion_time(self, phase: Any, quality_scores: Optional[QualityScores] = None) -> int:
        """Rough minutes left in the phase; low-quality drafts add time."""
        scores = quality_scores or QualityScores()
        phase = Phase.parse(phase)
        if is_terminal(phase):
            return 0
        estimate = BASE_COMPLETION_MINUTES[phase]
        low_quality = _objective_quality(scores) < LOW_QUALITY_THRESHOLD or any(
            kr.overall < LOW_QUALITY_THRESHOLD for kr in scores.key_results
        )
        if low_quality:
            estimate += LOW_QUALITY_EXTRA_MINUTES
        return estimate

    @staticmethod
    def get_phase_focus(phase: Any) -> str:
        return PHASE_FOCUS[Phase.parse(phase)]

    @staticmethod
    def generate_phase_transition_message(new_phase: Any) -> str:
        return TRANSITION_MESSAGES[Phase.parse(new_phase)]

"""Transition validation: the final authority on whether a phase change happens."""

import logging
from typing import Any, List, Optional, Tuple

from okrcoach.domain.exceptions import InvalidPhaseError
from okrcoach.domain.models import (
    Phase, PhaseTransitionResult, SessionSnapshot, TransitionErrorKind,
)
from okrcoach.scoring.models import QualityScores
from okrcoach.scoring.rules import round_half_up

from .phases import (
    PHASE_METADATA, OBJECTIVE, KEY_RESULTS,
    is_backward_transition, phases_between, is_terminal,
)

logger = logging.getLogger(__name__)

Issue = Tuple[TransitionErrorKind, str]

STRUCTURAL = TransitionErrorKind.STRUCTURAL_PRECONDITION
QUALITY = TransitionErrorKind.QUALITY_GATE


def _parse(value: Any) -> Optional[Phase]:
    try:
        return Phase.parse(value)
    except InvalidPhaseError:
        return None


def _objective_quality(scores: QualityScores) -> int:
    return scores.objective.overall if scores.objective is not None else 0


def _final_quality(scores: QualityScores) -> int:
    if scores.overall is not None:
        return scores.overall.score
    return _objective_quality(scores)


def _result(issues: List[Issue], warnings: List[str]) -> PhaseTransitionResult:
    seen = set()
    unique: List[Issue] = []
    for issue in issues:
        if issue[1] not in seen:
            seen.add(issue[1])
            unique.append(issue)
    return PhaseTransitionResult(
        valid=not unique,
        errors=tuple(msg for _, msg in unique),
        warnings=tuple(warnings),
        error_kinds=tuple(kind for kind, _ in unique),
    )


class TransitionValidator:
    """Validates proposed phase transitions and current-phase invariants.

    Both checks are pure functions of their inputs and never raise: unknown
    phases and missing data come back as errors on the result.
    """

    def validate_transition(
        self,
        from_phase: Any,
        to_phase: Any,
        session: Optional[SessionSnapshot] = None,
        quality_scores: Optional[QualityScores] = None,
    ) -> PhaseTransitionResult:
        session = session or SessionSnapshot()
        scores = quality_scores or QualityScores()
        issues: List[Issue] = []
        warnings: List[str] = []

        src, dst = _parse(from_phase), _parse(to_phase)
        if src is None or dst is None:
            for raw, parsed in ((from_phase, src), (to_phase, dst)):
                if parsed is None:
                    issues.append((STRUCTURAL, f"Unknown phase '{raw}'"))
            return _result(issues, warnings)

        if is_terminal(src):
            issues.append((
                TransitionErrorKind.TERMINAL_STATE,
                "Cannot transition from completed phase - it is terminal",
            ))
        elif is_backward_transition(src, dst):
            issues.append((
                TransitionErrorKind.BACKWARD_MOVEMENT,
                f"Invalid transition: {src.value} → {dst.value} (backward movement not allowed)",
            ))
            if src is dst:
                warnings.append("Transition to same phase (no-op)")
        else:
            crossed = phases_between(src, dst)
            if len(crossed) > 1:
                skipped = ", ".join(p.value for p in crossed[:-1])
                warnings.append(f"Skipping phases: {src.value} → {dst.value} passes through {skipped}")
            for phase in crossed:
                issues.extend(self.entry_gate(phase, session, scores))

        result = _result(issues, warnings)
        if not result.valid:
            logger.warning(
                "State transition rejected %s → %s (session %s): %s",
                src.value, dst.value, session.session_id or "-", "; ".join(result.errors),
            )
        elif warnings:
            logger.info("State transition %s → %s has warnings: %s", src.value, dst.value, "; ".join(warnings))
        return result

    def entry_gate(self, phase: Phase, session: SessionSnapshot, scores: QualityScores) -> List[Issue]:
        """Structural and quality preconditions for entering ``phase``."""
        need = PHASE_METADATA[phase].min_data_quality
        issues: List[Issue] = []

        if phase is Phase.REFINEMENT:
            if not session.has_objective:
                issues.append((STRUCTURAL, "Cannot enter refinement: No objective extracted from discovery"))
            if scores.objective is None:
                issues.append((STRUCTURAL, "Cannot enter refinement: Objective quality score is 0 (not yet evaluated)"))
            elif scores.objective.overall < need:
                issues.append((
                    QUALITY,
                    f"Objective quality too low for refinement ({scores.objective.overall}/100, need {need}+)",
                ))

        elif phase is Phase.KR_DISCOVERY:
            if not session.has_objective:
                issues.append((STRUCTURAL, "Cannot enter kr_discovery: No objective found in session"))
            quality = _objective_quality(scores)
            if quality < need:
                issues.append((
                    QUALITY,
                    f"Objective quality too low for KR creation ({quality}/100, need {need}+)",
                ))

        elif phase is Phase.VALIDATION:
            if not session.key_results:
                issues.append((STRUCTURAL, "Cannot enter validation: No key results created"))
            mean_kr = scores.mean_key_result_score or 0.0
            if mean_kr < need:
                issues.append((
                    QUALITY,
                    f"Key results quality too low ({round_half_up(mean_kr)}/100, need {need}+)",
                ))

        elif phase is Phase.COMPLETED:
            if not session.has_objective:
                issues.append((STRUCTURAL, "Cannot complete: No objective in session"))
            if not session.key_results:
                issues.append((STRUCTURAL, "Cannot complete: No key results in session"))
            quality = _final_quality(scores)
            if quality < need:
                issues.append((
                    QUALITY,
                    f"Overall OKR quality too low for completion ({quality}/100, need {need}+)",
                ))

        return issues

    def validate_phase_invariants(
        self,
        phase: Any,
        session: Optional[SessionSnapshot] = None,
        quality_scores: Optional[QualityScores] = None,
    ) -> PhaseTransitionResult:
        """Check that a session is consistent with being in ``phase``.

        Missing required data is an error; zero or absent quality scores are
        only warnings.
        """
        session = session or SessionSnapshot()
        scores = quality_scores or QualityScores()
        current = _parse(phase)
        if current is None:
            return _result([(STRUCTURAL, f"Unknown phase '{phase}'")], [])

        issues: List[Issue] = []
        warnings: List[str] = []
        present = {OBJECTIVE: session.has_objective, KEY_RESULTS: bool(session.key_results)}
        for item in PHASE_METADATA[current].requires_data:
            if not present[item]:
                issues.append((
                    STRUCTURAL,
                    f"Phase invariant violated: Missing required data '{item}' in {current.value} phase",
                ))

        if current is not Phase.DISCOVERY:
            if scores.objective is None or scores.objective.overall == 0:
                warnings.append(f"Unexpected state: In {current.value} phase but objective quality is 0")
        if current in (Phase.VALIDATION, Phase.COMPLETED) and not scores.key_results:
            warnings.append(f"Unexpected state: In {current.value} phase but no key results scored")

        return _result(issues, warnings)

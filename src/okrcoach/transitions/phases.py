"""Phase ordering and per-phase configuration."""

from dataclasses import dataclass
from typing import Dict, Tuple

from okrcoach.domain.models import Phase

PHASE_ORDER: Tuple[Phase, ...] = (
    Phase.DISCOVERY,
    Phase.REFINEMENT,
    Phase.KR_DISCOVERY,
    Phase.VALIDATION,
    Phase.COMPLETED,
)

OBJECTIVE = "objective"
KEY_RESULTS = "key_results"


@dataclass(frozen=True)
class PhaseConfig:
    min_messages: int            # turns before a natural transition is considered
    quality_threshold: float     # 0..1 readiness needed for a natural transition
    min_data_quality: int        # 0..100 gate for entering this phase
    timeout_turns: int           # default stall limit when a turn-limit timeout policy is on
    requires_data: Tuple[str, ...]
    description: str


PHASE_METADATA: Dict[Phase, PhaseConfig] = {
    Phase.DISCOVERY: PhaseConfig(
        min_messages=3,
        quality_threshold=0.6,
        min_data_quality=30,
        timeout_turns=12,
        requires_data=(),
        description="Understand business context and capture initial objective",
    ),
    Phase.REFINEMENT: PhaseConfig(
        min_messages=2,
        quality_threshold=0.7,
        min_data_quality=30,
        timeout_turns=10,
        requires_data=(OBJECTIVE,),
        description="Improve objective clarity, quality, and outcome focus",
    ),
    Phase.KR_DISCOVERY: PhaseConfig(
        min_messages=3,
        quality_threshold=0.6,
        min_data_quality=50,
        timeout_turns=8,
        requires_data=(OBJECTIVE,),
        description="Create 2-4 measurable key results",
    ),
    Phase.VALIDATION: PhaseConfig(
        min_messages=1,
        quality_threshold=0.7,
        min_data_quality=60,
        timeout_turns=12,
        requires_data=(OBJECTIVE, KEY_RESULTS),
        description="Final quality check and user approval",
    ),
    Phase.COMPLETED: PhaseConfig(
        min_messages=0,
        quality_threshold=1.0,
        min_data_quality=40,
        timeout_turns=0,
        requires_data=(OBJECTIVE, KEY_RESULTS),
        description="OKR finalized and stored - terminal state",
    ),
}


def phase_index(phase: Phase) -> int:
    return PHASE_ORDER.index(phase)


def get_next_phase(phase: Phase) -> Phase:
    """Following phase. The terminal phase is its own successor."""
    i = phase_index(phase)
    return PHASE_ORDER[i + 1] if i < len(PHASE_ORDER) - 1 else phase


def is_forward_transition(from_phase: Phase, to_phase: Phase) -> bool:
    return phase_index(to_phase) > phase_index(from_phase)


def is_backward_transition(from_phase: Phase, to_phase: Phase) -> bool:
    """Same-phase moves count as backward: progress must be strict."""
    return phase_index(to_phase) <= phase_index(from_phase)


def phases_between(from_phase: Phase, to_phase: Phase) -> Tuple[Phase, ...]:
    """Phases entered when moving forward from ``from_phase`` to ``to_phase``."""
    return PHASE_ORDER[phase_index(from_phase) + 1: phase_index(to_phase) + 1]


def is_terminal(phase: Phase) -> bool:
    return phase is Phase.COMPLETED

"""Phase ordering and transition validation."""

from .phases import (
    PHASE_ORDER,
    PHASE_METADATA,
    PhaseConfig,
    get_next_phase,
    phase_index,
    is_forward_transition,
    is_backward_transition,
)
from .validator import TransitionValidator

__all__ = [
    "PHASE_ORDER",
    "PHASE_METADATA",
    "PhaseConfig",
    "get_next_phase",
    "phase_index",
    "is_forward_transition",
    "is_backward_transition",
    "TransitionValidator",
]

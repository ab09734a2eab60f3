"""Per-turn phase control: readiness, coaching strategy and scope detection."""

from .phase_controller import PhaseController, PhaseReadiness
from .session_guard import SessionTurnGuard
from .signals import (
    FinalizationSignals,
    ResistanceSignals,
    analyze_resistance,
    detect_finalization,
    has_completion_language,
)
from .timeout import TimeoutPolicy, NoTimeoutPolicy, TurnLimitTimeoutPolicy

__all__ = [
    "PhaseController",
    "PhaseReadiness",
    "SessionTurnGuard",
    "FinalizationSignals",
    "ResistanceSignals",
    "analyze_resistance",
    "detect_finalization",
    "has_completion_language",
    "TimeoutPolicy",
    "NoTimeoutPolicy",
    "TurnLimitTimeoutPolicy",
]

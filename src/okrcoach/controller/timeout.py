"""Policies that decide when a stalled phase is pushed forward."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from okrcoach.domain.exceptions import ParameterValidationError
from okrcoach.domain.models import Phase
from okrcoach.transitions.phases import PHASE_METADATA


class TimeoutPolicy(ABC):
    """Extension point for forcing progression out of a stalled phase.

    A forced transition is only a proposal: the transition validator still
    has the final say.
    """

    @abstractmethod
    def should_force(self, phase: Phase, turns_in_phase: int) -> bool:
        ...

    def describe(self) -> str:
        return type(self).__name__


class NoTimeoutPolicy(TimeoutPolicy):
    """Never forces a transition."""

    def should_force(self, phase: Phase, turns_in_phase: int) -> bool:
        return False


class TurnLimitTimeoutPolicy(TimeoutPolicy):
    """Forces progression once a phase has run for its turn limit.

    ``limits`` maps phases (or phase tokens) to turn counts; when omitted the
    per-phase defaults from the phase metadata apply. A limit of zero disables
    the timeout for that phase.
    """

    def __init__(self, limits: Optional[Mapping[Any, int]] = None):
        if limits is None:
            self.limits: Dict[Phase, int] = {p: cfg.timeout_turns for p, cfg in PHASE_METADATA.items()}
        else:
            self.limits = {Phase.parse(k): _turn_limit(k, v) for k, v in limits.items()}

    def should_force(self, phase: Phase, turns_in_phase: int) -> bool:
        if phase is Phase.COMPLETED:
            return False
        limit = self.limits.get(phase, 0)
        return limit > 0 and turns_in_phase >= limit

    def describe(self) -> str:
        active = ", ".join(f"{p.value}={n}" for p, n in self.limits.items() if n > 0)
        return f"{type(self).__name__}({active})"


def _turn_limit(phase: Any, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ParameterValidationError(
            f"Turn limit for {phase} must be a non-negative integer, got {value!r}",
            parameter="timeout_turns",
            field_value=value,
            expected="int >= 0",
        )
    return value

"""Domain models shared by the scoring, detection and phase components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from okrcoach.domain.exceptions import InvalidPhaseError


def _text(value: Any) -> Optional[str]:
    """Strings pass through; anything else from JSON is treated as absent."""
    return value if isinstance(value, str) and value else None


class Phase(Enum):
    """Coaching phases. Values are the wire tokens shared with session storage."""
    DISCOVERY = "discovery"
    REFINEMENT = "refinement"
    KR_DISCOVERY = "kr_discovery"
    VALIDATION = "validation"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Any) -> "Phase":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise InvalidPhaseError(value) from e


class ObjectiveScope(Enum):
    STRATEGIC = "strategic"
    DEPARTMENTAL = "departmental"
    TEAM = "team"
    INITIATIVE = "initiative"
    PROJECT = "project"

    @classmethod
    def parse(cls, value: Any, default: "ObjectiveScope" = None) -> "ObjectiveScope":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            if default is not None:
                return default
            raise


class QualityLevel(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    NEEDS_WORK = "needs_work"
    POOR = "poor"


class ConversationStrategy(Enum):
    DIRECT_COACHING = "direct_coaching"
    GENTLE_GUIDANCE = "gentle_guidance"
    DISCOVERY_EXPLORATION = "discovery_exploration"


class TransitionErrorKind(Enum):
    """Why a phase transition was rejected."""
    STRUCTURAL_PRECONDITION = "structural_precondition"
    QUALITY_GATE = "quality_gate"
    TERMINAL_STATE = "terminal_state"
    BACKWARD_MOVEMENT = "backward_movement"


@dataclass(frozen=True)
class UserContext:
    """Optional organisational context. Missing fields disable context bonuses."""
    industry: Optional[str] = None
    function: Optional[str] = None
    timeframe: Optional[str] = None
    team_size: Optional[int] = None
    requires_cross_functional: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "UserContext":
        if not data:
            return cls()
        team_size = data.get("team_size")
        try:
            team_size = int(team_size) if team_size is not None else None
        except (TypeError, ValueError):
            team_size = None
        return cls(
            industry=_text(data.get("industry")),
            function=_text(data.get("function")),
            timeframe=_text(data.get("timeframe")),
            team_size=team_size,
            requires_cross_functional=bool(data.get("requires_cross_functional", False)),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "industry": self.industry,
            "function": self.function,
            "timeframe": self.timeframe,
            "team_size": self.team_size,
            "requires_cross_functional": self.requires_cross_functional,
        }


@dataclass(frozen=True)
class UserProfile:
    """How the user tends to respond to coaching."""
    communication_style: str = "collaborative"   # direct | collaborative | analytical | supportive
    experience_level: str = "intermediate"       # novice | intermediate | experienced
    resistance_patterns: Tuple[str, ...] = ()
    previous_attempts: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "UserProfile":
        if not data:
            return cls()
        return cls(
            communication_style=str(data.get("communication_style", "collaborative")),
            experience_level=str(data.get("experience_level", "intermediate")),
            resistance_patterns=tuple(data.get("resistance_patterns") or ()),
            previous_attempts=int(data.get("previous_attempts", 0) or 0),
        )


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a coaching session, owned by the session manager."""
    session_id: str = ""
    phase: Phase = Phase.DISCOVERY
    objective: Optional[str] = None
    key_results: Tuple[str, ...] = ()
    turn_count: int = 0
    phase_turn_count: Optional[int] = None
    context: UserContext = field(default_factory=UserContext)
    recent_user_messages: Tuple[str, ...] = ()
    user_confirmed: bool = False
    profile: UserProfile = field(default_factory=UserProfile)

    @property
    def has_objective(self) -> bool:
        return isinstance(self.objective, str) and bool(self.objective.strip())

    @property
    def turns_in_phase(self) -> int:
        return self.turn_count if self.phase_turn_count is None else self.phase_turn_count

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionSnapshot":
        """Build a snapshot from JSON. Raises InvalidPhaseError for unknown phases."""
        key_results = [kr for kr in (data.get("key_results") or []) if isinstance(kr, str)]
        phase_turns = data.get("phase_turn_count")
        return cls(
            session_id=str(data.get("session_id", "")),
            phase=Phase.parse(data.get("phase", Phase.DISCOVERY.value)),
            objective=_text(data.get("objective")),
            key_results=tuple(key_results),
            turn_count=int(data.get("turn_count", 0) or 0),
            phase_turn_count=int(phase_turns) if phase_turns is not None else None,
            context=UserContext.from_dict(data.get("context")),
            recent_user_messages=tuple(
                m for m in (data.get("recent_user_messages") or ()) if isinstance(m, str)
            ),
            user_confirmed=bool(data.get("user_confirmed", False)),
            profile=UserProfile.from_dict(data.get("profile")),
        )


@dataclass(frozen=True)
class PhaseTransitionResult:
    """Verdict of the transition validator. error_kinds runs parallel to errors."""
    valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    error_kinds: Tuple[TransitionErrorKind, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "error_kinds": [k.value for k in self.error_kinds],
        }

    def kinds(self) -> List[TransitionErrorKind]:
        return list(dict.fromkeys(self.error_kinds))

"""Domain layer for okrcoach."""
from .models import (
    Phase,
    ObjectiveScope,
    QualityLevel,
    ConversationStrategy,
    TransitionErrorKind,
    UserContext,
    UserProfile,
    SessionSnapshot,
    PhaseTransitionResult,
)

__all__ = [
    "Phase",
    "ObjectiveScope",
    "QualityLevel",
    "ConversationStrategy",
    "TransitionErrorKind",
    "UserContext",
    "UserProfile",
    "SessionSnapshot",
    "PhaseTransitionResult",
]

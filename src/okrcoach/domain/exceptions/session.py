"""Session and phase exceptions raised at the edges of the engine."""

from typing import Optional, Any
from .base import OkrCoachError, RetryableError
from .validation import ValidationError

class SessionError(OkrCoachError):
    """Base class for session handling errors."""

    def __init__(self, message: str, *, session_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if session_id:
            self.add_context('session_id', session_id)

    def _get_default_error_code(self) -> str:
        return "SESSION_ERROR"


class SessionBusyError(RetryableError, SessionError):
    """Raised when a turn for a session is already being processed."""

    def __init__(self, session_id: str, *, timeout: Optional[float] = None, **kwargs):
        super().__init__(
            f"Session {session_id} is already processing a turn",
            session_id=session_id,
            recoverable=True,
            **kwargs
        )
        if timeout is not None:
            self.add_context('timeout_seconds', timeout)
        self.add_suggestion("Retry once the current turn has finished")

    def _get_default_error_code(self) -> str:
        return "SESSION_BUSY"


class InvalidPhaseError(ValidationError):
    """Raised when a phase token cannot be parsed."""

    def __init__(self, value: Any, **kwargs):
        super().__init__(
            f"Unknown phase: {value!r}",
            field_name="phase",
            field_value=value,
            **kwargs
        )
        self.add_suggestion(
            "Use one of: discovery, refinement, kr_discovery, validation, completed"
        )

    def _get_default_error_code(self) -> str:
        return "INVALID_PHASE"

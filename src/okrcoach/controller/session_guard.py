"""Per-session turn serialization."""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from okrcoach.domain.exceptions import SessionBusyError

logger = logging.getLogger(__name__)


class SessionTurnGuard:
    """Hands out one lock per session id.

    Turns for the same session run one at a time; different sessions never
    block each other. ``timeout=None`` waits indefinitely, ``timeout=0`` fails
    fast with SessionBusyError.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout
        self._lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._holders: Dict[str, int] = {}

    def _acquire_ref(self, session_id: str) -> threading.Lock:
        with self._lock:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.Lock()
            self._holders[session_id] = self._holders.get(session_id, 0) + 1
            return lock

    def _release_ref(self, session_id: str) -> None:
        with self._lock:
            remaining = self._holders.get(session_id, 1) - 1
            if remaining <= 0:
                # last interested caller drops the lock so idle sessions do not accumulate
                self._holders.pop(session_id, None)
                self._locks.pop(session_id, None)
            else:
                self._holders[session_id] = remaining

    @contextmanager
    def turn(self, session_id: str, timeout: Optional[float] = None) -> Iterator[None]:
        """Hold the session's lock for the duration of one turn."""
        wait = self.timeout if timeout is None else timeout
        lock = self._acquire_ref(session_id)
        if wait is None:
            acquired = lock.acquire()
        else:
            acquired = lock.acquire(timeout=wait) if wait > 0 else lock.acquire(blocking=False)
        if not acquired:
            self._release_ref(session_id)
            logger.warning("Session %s busy; gave up after %.2fs", session_id, wait or 0.0)
            raise SessionBusyError(session_id, timeout=wait)
        try:
            yield
        finally:
            lock.release()
            self._release_ref(session_id)

    def is_busy(self, session_id: str) -> bool:
        with self._lock:
            lock = self._locks.get(session_id)
        return lock is not None and lock.locked()

    def active_sessions(self) -> int:
        with self._lock:
            return len(self._locks)

import threading
import time

import pytest

from okrcoach.controller import SessionTurnGuard
from okrcoach.domain.exceptions import RetryableError, SessionBusyError


class TestSessionTurnGuard:

    def test_turn_releases_lock(self):
        guard = SessionTurnGuard()
        with guard.turn("s1"):
            assert guard.is_busy("s1")
            assert guard.active_sessions() == 1
        assert not guard.is_busy("s1")
        assert guard.active_sessions() == 0

    def test_fail_fast_when_busy(self):
        guard = SessionTurnGuard(timeout=0)
        with guard.turn("s1"):
            with pytest.raises(SessionBusyError) as exc_info:
                with guard.turn("s1"):
                    pass
        err = exc_info.value
        assert isinstance(err, RetryableError)
        assert err.recoverable
        assert err.error_code == "SESSION_BUSY"
        assert err.context["session_id"] == "s1"
        assert err.context["timeout_seconds"] == 0
        assert guard.active_sessions() == 0

    def test_per_call_timeout_overrides_default(self):
        guard = SessionTurnGuard()
        with guard.turn("s1"):
            with pytest.raises(SessionBusyError):
                with guard.turn("s1", timeout=0.01):
                    pass

    def test_sessions_do_not_block_each_other(self):
        guard = SessionTurnGuard(timeout=0)
        with guard.turn("a"):
            with guard.turn("b"):
                assert guard.active_sessions() == 2

    def test_lock_released_on_error(self):
        guard = SessionTurnGuard(timeout=0)
        with pytest.raises(ValueError):
            with guard.turn("s1"):
                raise ValueError("turn failed")
        with guard.turn("s1"):
            pass

    def test_turns_for_one_session_are_serialised(self):
        guard = SessionTurnGuard()
        active = []
        peak = []
        counter_lock = threading.Lock()

        def worker():
            with guard.turn("shared"):
                with counter_lock:
                    active.append(1)
                    peak.append(len(active))
                time.sleep(0.01)
                with counter_lock:
                    active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert max(peak) == 1
        assert len(peak) == 5
        assert guard.active_sessions() == 0

"""Per-subnet attempt counter with a permanent block set.

State: attempts[group] -> int for the current window, blocked = {group},
and window_start.  Everything sits behind one lock: the pipeline is the
only writer, but the tracker may be read from a metrics scrape or fed by
more than one source.

The window is fixed and reset-by-elapsed-time: once window_seconds have
passed since window_start, every counter is cleared at once and
window_start moves to "now".  Windows are therefore not calendar aligned
and drift with traffic.  Blocks survive resets; there is no unblock.
"""

import threading
import time

DEFAULT_THRESHOLD = 5
DEFAULT_WINDOW_SECONDS = 60


class SubnetTracker:

    def __init__(self, threshold: int = DEFAULT_THRESHOLD,
                 window_seconds: float = DEFAULT_WINDOW_SECONDS):
        self.threshold = threshold
        self.window_seconds = window_seconds

        self._lock = threading.Lock()
        self._attempts: dict[str, int] = {}
        self._blocked: set[str] = set()
        self._window_start = time.time()

    def is_blocked(self, group: str) -> bool:
        with self._lock:
            return group in self._blocked

    def record_attempt(self, group: str) -> tuple[bool, int]:
        """Count one failed attempt for *group*.

        Returns (blocked_now, count).  blocked_now is True only for the
        call that moved the count past the threshold, so the caller sends
        exactly one block alert.  Already-blocked groups are left alone
        and report (False, <unchanged count>).

        Check, increment, compare and block happen in one critical
        section.  Splitting it lets two callers both see count ==
        threshold and both claim the block.
        """
        with self._lock:
            if group in self._blocked:
                return False, self._attempts.get(group, 0)

            count = self._attempts.get(group, 0) + 1
            self._attempts[group] = count

            if count > self.threshold:
                self._blocked.add(group)
                return True, count
            return False, count

    def maybe_reset_window(self) -> bool:
        """Clear all counters if the window has elapsed.  Returns True on reset."""
        now = time.time()
        with self._lock:
            if now - self._window_start < self.window_seconds:
                return False
            self._attempts = {}
            self._window_start = now
            return True

    # ------------------------------------------------------------------
    # Read-only views (diagnostics, metrics, tests)
    # ------------------------------------------------------------------

    def attempts(self, group: str) -> int:
        with self._lock:
            return self._attempts.get(group, 0)

    def blocked_groups(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._blocked)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "attempts": dict(self._attempts),
                "blocked": sorted(self._blocked),
                "window_start": self._window_start,
            }

"""
Rate Limiting

Thread-safe minimum-interval limiter shared by worker pools so that
concurrent registry pages and search calls still respect a fixed delay
between outbound requests.
"""

import threading
import time


class RateLimiter:
    """Interval limiter: at most one call per ``min_interval`` seconds."""

    def __init__(self, min_interval: float):
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0 (got {min_interval})")
        self.min_interval = min_interval
        self.calls_made = 0
        self._next = 0.0
        self._lock = threading.Lock()

    @classmethod
    def from_millis(cls, delay_ms: int) -> "RateLimiter":
        return cls(delay_ms / 1000.0)

    def wait(self) -> None:
        """Block until the next call slot is available, then claim it."""
        with self._lock:
            now = time.monotonic()
            wait_for = self._next - now
            if wait_for > 0:
                time.sleep(wait_for)
                now = time.monotonic()
            self._next = now + self.min_interval
            self.calls_made += 1

"""
Fixed-window rate limiting for outbound FireCrawl API calls.

Two counters are kept, one per second and one per minute. A window resets
once more than its length has elapsed since it started; a call is refused
when either counter is at its ceiling. Bursts straddling a window boundary
can reach twice the nominal rate, which is accepted behaviour for a fixed
window.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

REQUESTS_PER_SECOND = 2
REQUESTS_PER_MINUTE = 60


@dataclass
class FixedWindow:
    """Call counter for one fixed time window."""

    capacity: int
    length: float  # seconds
    count: int = 0
    started_at: float = 0.0

    def roll(self, now: float) -> bool:
        """
        Start a new window if the current one has expired.

        Args:
            now: Current clock reading in seconds

        Returns:
            bool: True if the window was reset
        """
        if now - self.started_at > self.length:
            self.count = 0
            self.started_at = now
            return True
        return False

    @property
    def is_full(self) -> bool:
        return self.count >= self.capacity

    def time_until_reset(self, now: float) -> float:
        return max(0.0, self.started_at + self.length - now)


class FixedWindowRateLimiter:
    """
    Per-second and per-minute fixed-window limiter.

    Refusal is immediate: there is no queueing and no retry. The
    check-and-increment sequence runs under a lock so concurrent callers
    cannot both pass on the last free slot.
    """

    def __init__(
        self,
        per_second: int = REQUESTS_PER_SECOND,
        per_minute: int = REQUESTS_PER_MINUTE,
        clock: Callable[[], float] | None = None,
    ):
        """
        Initialize the limiter.

        Args:
            per_second: Ceiling of the 1 second window
            per_minute: Ceiling of the 60 second window
            clock: Monotonic clock in seconds, injectable for tests
        """
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()

        now = self._clock()
        self._windows = {
            "second": FixedWindow(capacity=per_second, length=1.0, started_at=now),
            "minute": FixedWindow(capacity=per_minute, length=60.0, started_at=now),
        }

    def check_and_consume(self) -> None:
        """
        Take one slot from both windows.

        Raises:
            RateLimitExceededError: If either window is already full
        """
        with self._lock:
            now = self._clock()
            for window in self._windows.values():
                window.roll(now)

            for name, window in self._windows.items():
                if window.is_full:
                    logger.warning(
                        f"Rate limit reached for {name} window "
                        f"({window.count}/{window.capacity}), "
                        f"resets in {window.time_until_reset(now):.2f}s"
                    )
                    raise RateLimitExceededError(
                        "Rate limit exceeded",
                        details={"window": name, "limit": window.capacity},
                    )

            for window in self._windows.values():
                window.count += 1

    def get_rate_limit_status(self) -> dict[str, Any]:
        """
        Get current rate limit status.

        Returns:
            Dict with limit, used, remaining and seconds until reset per window
        """
        with self._lock:
            now = self._clock()
            status: dict[str, Any] = {}
            for name, window in self._windows.items():
                expired = now - window.started_at > window.length
                used = 0 if expired else window.count
                status[name] = {
                    "limit": window.capacity,
                    "used": used,
                    "remaining": max(0, window.capacity - used),
                    "reset_in": 0.0 if expired else round(window.time_until_reset(now), 3),
                }
            return status

    def reset(self) -> None:
        """Clear both windows."""
        with self._lock:
            now = self._clock()
            for window in self._windows.values():
                window.count = 0
                window.started_at = now

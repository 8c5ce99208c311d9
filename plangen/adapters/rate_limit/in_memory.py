"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from plangen.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitPolicy,
    RateLimitResult,
)

logger = logging.getLogger(__name__)


@dataclass
class _WindowState:
    count: int
    reset_at: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per (policy, client) pair.

    A window starts on the first request from a client and lasts
    ``policy.window_seconds``. Expired windows are reset lazily on the next
    access; :meth:`sweep` reclaims the memory of clients that never return.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        each worker will enforce its own independent limits.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: dict[tuple[str, str], _WindowState] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def check_and_consume(
        self,
        policy_name: str,
        client_key: str,
        policy: RateLimitPolicy,
    ) -> RateLimitResult:
        """Check the client's window and count the request if allowed.

        Rejected requests are not counted against the window.

        Args:
            policy_name: Policy namespace for the window.
            client_key: Client identifier.
            policy: Limits to apply.

        Returns:
            RateLimitResult with allowance decision and metadata.
        """
        now = self._clock()
        key = (policy_name, client_key)

        with self._lock:
            state = self._windows.get(key)
            if state is None or state.reset_at <= now:
                state = _WindowState(count=0, reset_at=now + policy.window_seconds)
                self._windows[key] = state

            if state.count >= policy.max_requests:
                return RateLimitResult(
                    allowed=False,
                    limit=policy.max_requests,
                    remaining=0,
                    reset_at=state.reset_at,
                    retry_after_seconds=max(0, int(math.ceil(state.reset_at - now))),
                )

            state.count += 1
            return RateLimitResult(
                allowed=True,
                limit=policy.max_requests,
                remaining=policy.max_requests - state.count,
                reset_at=state.reset_at,
                retry_after_seconds=None,
            )

    def sweep(self) -> int:
        """Remove every window whose reset time has passed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, state in self._windows.items() if now > state.reset_at]
            for key in expired:
                del self._windows[key]
            remaining = len(self._windows)

        logger.debug(
            "rate_limit.sweep",
            extra={"removed": len(expired), "windows": remaining},
        )
        return len(expired)

    def clear(self) -> None:
        """Forget all windows."""
        with self._lock:
            self._windows.clear()

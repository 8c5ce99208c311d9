"""Rate limiter interfaces and the named policy table.

The API should depend on this abstraction (not the concrete implementation)
so we can swap storage backends later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitPolicy:
    """Fixed-window limit applied to one class of routes.

    Attributes:
        max_requests: Requests allowed per window.
        window_seconds: Window length in seconds.
    """

    max_requests: int
    window_seconds: float

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")


AI_GENERATION = "AI_GENERATION"
PLAN_STORAGE = "PLAN_STORAGE"
PLAN_RETRIEVAL = "PLAN_RETRIEVAL"

# AI calls are the most expensive, read-only retrieval the cheapest.
RATE_LIMITS: dict[str, RateLimitPolicy] = {
    AI_GENERATION: RateLimitPolicy(max_requests=10, window_seconds=60 * 60),
    PLAN_STORAGE: RateLimitPolicy(max_requests=50, window_seconds=60 * 60),
    PLAN_RETRIEVAL: RateLimitPolicy(max_requests=200, window_seconds=60 * 60),
}


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check/consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check_and_consume(
        self,
        policy_name: str,
        client_key: str,
        policy: RateLimitPolicy,
    ) -> RateLimitResult:
        """Consume one request from the client's window under a policy.

        Args:
            policy_name: Name of the policy; windows are independent per name.
            client_key: Client identifier (e.g., IP address).
            policy: Limits to apply.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep(self) -> int:
        """Drop expired windows.

        Returns:
            Number of windows removed.
        """
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        """Number of windows currently tracked."""
        raise NotImplementedError

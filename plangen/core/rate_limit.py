"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

- Each costed route names a policy from the policy table (AI generation,
  plan storage, plan retrieval); windows are independent per policy.
- Clients are keyed by the first X-Forwarded-For address, then the peer
  address, then a shared "unknown" bucket.
- The limiter and policy table live on ``app.state`` and are created by the
  application factory.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Awaitable, Callable

from fastapi import Request, Response

from plangen.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitPolicy,
    RateLimitResult,
)
from plangen.core.config import settings
from plangen.core.errors import RateLimitExceededError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_client_key(request: Request) -> str:
    """Derive the rate limit key for the requesting client.

    Args:
        request: FastAPI request.

    Returns:
        Client address, or ``"unknown"`` when none can be derived.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_CLIENT


def _hash_client_key(key: str) -> str:
    """Hash the client key for logging without exposing addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(int(result.reset_at)),
    }


def enforce_rate_limit(
    policy_name: str,
) -> Callable[[Request, Response], Awaitable[RateLimitResult | None]]:
    """Build a dependency that consumes one request from a named policy.

    Usage:
        @router.post("/plans/store")
        async def store(limit: RateLimitResult | None = Depends(enforce_rate_limit(PLAN_STORAGE))):
            ...

    Args:
        policy_name: Key into the policy table on ``app.state``.

    Returns:
        Dependency returning the RateLimitResult, or None when limiting is
        disabled.
    """

    async def dependency(request: Request, response: Response) -> RateLimitResult | None:
        if not settings.app.rate_limit_enabled:
            return None

        limiter: AbstractRateLimiter = request.app.state.rate_limiter
        policy: RateLimitPolicy = request.app.state.rate_limit_policies[policy_name]
        client_key = get_client_key(request)

        result = limiter.check_and_consume(policy_name, client_key, policy)
        log_extra = {
            "policy": policy_name,
            "client_hash": _hash_client_key(client_key),
            "limit": result.limit,
            "remaining": result.remaining,
            "window_s": policy.window_seconds,
        }

        if result.allowed:
            logger.info("rate_limit.allowed", extra=log_extra)
            if settings.app.rate_limit_include_headers:
                response.headers.update(rate_limit_headers(result))
            return result

        retry_after = result.retry_after_seconds or 0
        logger.warning("rate_limit.exceeded", extra={**log_extra, "retry_after_s": retry_after})
        raise RateLimitExceededError(
            code="rate_limit_exceeded",
            message="Rate limit exceeded. Try again later.",
            details={
                "limit": result.limit,
                "remaining": result.remaining,
                "reset_at": int(result.reset_at),
                "retry_after": retry_after,
            },
        )

    dependency.__name__ = f"enforce_rate_limit_{policy_name.lower()}"
    return dependency

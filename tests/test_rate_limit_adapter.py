"""Unit tests for the in-memory fixed-window rate limiter."""

import threading

import pytest

from plangen.adapters.rate_limit.base import (
    AI_GENERATION,
    PLAN_RETRIEVAL,
    PLAN_STORAGE,
    RATE_LIMITS,
    RateLimitPolicy,
)
from plangen.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

POLICY = RateLimitPolicy(max_requests=3, window_seconds=1.0)


def test_allows_up_to_limit_then_blocks(clock) -> None:
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)

    remaining = [limiter.check_and_consume("p", "k", POLICY).remaining for _ in range(3)]
    assert remaining == [2, 1, 0]

    blocked = limiter.check_and_consume("p", "k", POLICY)
    assert blocked.allowed is False
    assert blocked.remaining == 0
    assert blocked.retry_after_seconds == 1


def test_resets_after_window(clock) -> None:
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)
    for _ in range(4):
        limiter.check_and_consume("p", "k", POLICY)

    clock.advance(1.5)
    result = limiter.check_and_consume("p", "k", POLICY)

    assert result.allowed is True
    assert result.remaining == 2
    assert result.reset_at == clock() + 1.0


def test_window_starts_at_first_request(clock) -> None:
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)

    first = limiter.check_and_consume("p", "k", POLICY)
    clock.advance(0.5)
    second = limiter.check_and_consume("p", "k", POLICY)

    assert first.reset_at == 1_001.0
    assert second.reset_at == first.reset_at


def test_rejection_does_not_extend_or_count(clock) -> None:
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)
    for _ in range(3):
        limiter.check_and_consume("p", "k", POLICY)

    first_block = limiter.check_and_consume("p", "k", POLICY)
    second_block = limiter.check_and_consume("p", "k", POLICY)

    assert first_block.reset_at == second_block.reset_at
    clock.advance(1.0)
    assert limiter.check_and_consume("p", "k", POLICY).remaining == 2


def test_isolated_by_client_key(clock) -> None:
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)
    single = RateLimitPolicy(max_requests=1, window_seconds=60)

    assert limiter.check_and_consume("p", "k1", single).allowed is True
    assert limiter.check_and_consume("p", "k1", single).allowed is False
    assert limiter.check_and_consume("p", "k2", single).allowed is True


def test_isolated_by_policy_name(clock) -> None:
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)
    single = RateLimitPolicy(max_requests=1, window_seconds=60)

    assert limiter.check_and_consume(AI_GENERATION, "k", single).allowed is True
    assert limiter.check_and_consume(AI_GENERATION, "k", single).allowed is False
    assert limiter.check_and_consume(PLAN_STORAGE, "k", single).allowed is True


def test_sweep_removes_only_expired_windows(clock) -> None:
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)
    limiter.check_and_consume("p", "old", RateLimitPolicy(max_requests=5, window_seconds=10))
    limiter.check_and_consume("p", "new", RateLimitPolicy(max_requests=5, window_seconds=100))

    clock.advance(50)

    assert limiter.sweep() == 1
    assert len(limiter) == 1
    # Surviving window keeps its count
    assert limiter.check_and_consume(
        "p", "new", RateLimitPolicy(max_requests=5, window_seconds=100)
    ).remaining == 3


def test_expired_but_unswept_window_is_reset_on_access(clock) -> None:
    limiter = InMemoryFixedWindowRateLimiter(clock=clock)
    for _ in range(3):
        limiter.check_and_consume("p", "k", POLICY)

    clock.advance(5)

    assert len(limiter) == 1
    assert limiter.check_and_consume("p", "k", POLICY).remaining == 2


def test_concurrent_consumers_never_exceed_limit() -> None:
    limiter = InMemoryFixedWindowRateLimiter()
    policy = RateLimitPolicy(max_requests=50, window_seconds=60)
    allowed: list[bool] = []
    lock = threading.Lock()

    def _worker() -> None:
        for _ in range(10):
            result = limiter.check_and_consume("p", "shared", policy)
            with lock:
                allowed.append(result.allowed)

    threads = [threading.Thread(target=_worker) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert allowed.count(True) == 50


def test_policy_table_values() -> None:
    assert RATE_LIMITS[AI_GENERATION] == RateLimitPolicy(max_requests=10, window_seconds=3600)
    assert RATE_LIMITS[PLAN_STORAGE] == RateLimitPolicy(max_requests=50, window_seconds=3600)
    assert RATE_LIMITS[PLAN_RETRIEVAL] == RateLimitPolicy(max_requests=200, window_seconds=3600)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_requests": 0, "window_seconds": 60},
        {"max_requests": 1, "window_seconds": 0},
    ],
)
def test_invalid_policy_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        RateLimitPolicy(**kwargs)

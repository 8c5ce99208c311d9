"""In-memory plan store with TTL expiry.

Single-process and non-durable: a restart loses every stored plan. Expired
plans are dropped by :meth:`InMemoryPlanStore.sweep`, and reads treat them as
missing even before the sweep runs.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import string
import threading
import time
from dataclasses import dataclass
from typing import Callable

from plangen.adapters.storage.base import AbstractPlanStore
from plangen.core.errors import CapacityError

logger = logging.getLogger(__name__)


PLAN_ID_ALPHABET = string.ascii_letters + string.digits
PLAN_ID_LENGTH = 8
DEFAULT_TTL_SECONDS = 30 * 24 * 60 * 60
DEFAULT_MAX_ATTEMPTS = 10


def generate_plan_id() -> str:
    """Return a random 8-character alphanumeric id."""
    return "".join(secrets.choice(PLAN_ID_ALPHABET) for _ in range(PLAN_ID_LENGTH))


def _hash_key(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()[:16]


@dataclass
class StoredPlan:
    """Plan content with creation metadata."""

    content: str
    created_at: float
    originator_key: str


class InMemoryPlanStore(AbstractPlanStore):
    """Thread-safe, in-memory plan store keyed by short random ids.

    Attributes:
        ttl_seconds: Age after which a plan is considered expired.
        max_attempts: Id generation attempts before raising CapacityError.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = generate_plan_id,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        self._ttl = ttl_seconds
        self._max_attempts = max_attempts
        self._clock = clock
        self._id_factory = id_factory
        self._plans: dict[str, StoredPlan] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._expirations = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryPlanStore(ttl_seconds={self._ttl}, size={len(self._plans)}, "
            f"hits={self._hits}, misses={self._misses}, expirations={self._expirations})"
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._plans)

    def put(self, content: str, *, originator_key: str = "unknown") -> str:
        """Store content under a freshly generated id.

        Args:
            content: Plan Markdown (validated by the caller).
            originator_key: Client key of the creator, kept for auditing.

        Returns:
            The new 8-character id.

        Raises:
            CapacityError: If every attempt collided with a live id.
        """

        with self._lock:
            for attempt in range(1, self._max_attempts + 1):
                plan_id = self._id_factory()
                if plan_id not in self._plans:
                    break
                logger.debug("plan_store.id_collision", extra={"attempt": attempt})
            else:
                logger.error(
                    "plan_store.id_exhausted",
                    extra={"attempts": self._max_attempts, "size": len(self._plans)},
                )
                raise CapacityError(
                    code="plan_id_exhausted",
                    message="Failed to generate a unique plan id",
                    details={"attempts": self._max_attempts},
                )

            self._plans[plan_id] = StoredPlan(
                content=content,
                created_at=self._clock(),
                originator_key=originator_key,
            )
            size = len(self._plans)

        logger.info(
            "plan_store.put",
            extra={
                "plan_id": plan_id,
                "content_length": len(content),
                "client_hash": _hash_key(originator_key),
                "size": size,
            },
        )
        return plan_id

    def get(self, plan_id: str) -> str | None:
        """Return the content for plan_id.

        Unknown and expired ids both return None.
        """

        with self._lock:
            plan = self._plans.get(plan_id)
            if plan is None or self._is_expired(plan, self._clock()):
                self._misses += 1
                return None

            self._hits += 1
            return plan.content

    def sweep(self) -> int:
        """Delete every plan older than the TTL."""

        now = self._clock()
        with self._lock:
            expired = [pid for pid, plan in self._plans.items() if self._is_expired(plan, now)]
            for pid in expired:
                del self._plans[pid]
            self._expirations += len(expired)
            size = len(self._plans)

        logger.info(
            "plan_store.sweep",
            extra={"removed": len(expired), "size": size},
        )
        return len(expired)

    def clear(self) -> None:
        """Remove all plans and reset counters."""

        with self._lock:
            self._plans.clear()
            self._hits = 0
            self._misses = 0
            self._expirations = 0

    def stats(self) -> dict[str, int | float]:
        """Return lightweight store metrics without exposing content."""

        with self._lock:
            return {
                "ttl_seconds": self._ttl,
                "entries": len(self._plans),
                "hits": self._hits,
                "misses": self._misses,
                "expirations": self._expirations,
            }

    def _is_expired(self, plan: StoredPlan, now: float) -> bool:
        return now - plan.created_at > self._ttl

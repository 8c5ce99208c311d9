from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractPlanStore(ABC):
    """Interface for stores that hand out short ids for plan content."""

    @abstractmethod
    def put(self, content: str, *, originator_key: str = "unknown") -> str:
        """Store plan content and return its short id.

        Raises:
            CapacityError: If no unique id could be allocated.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, plan_id: str) -> str | None:
        """Return stored content, or None when unknown or expired."""
        raise NotImplementedError

    @abstractmethod
    def sweep(self) -> int:
        """Delete expired plans and return how many were removed."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        """Number of plans currently held, expired or not."""
        raise NotImplementedError

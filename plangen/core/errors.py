"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    max_value: int
    actual_value: int
    attempts: int
    limit: int
    remaining: int
    reset_at: int
    retry_after: int
    model: str
    template: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class DecodeError(AppError):
    """Raised when a share token cannot be turned back into plan text."""


class CapacityError(AppError):
    """Raised when the plan store cannot allocate a unique id."""


class PlanNotFoundError(AppError):
    """Raised by the HTTP layer for unknown or expired plan ids."""


class RateLimitExceededError(AppError):
    """Raised by the HTTP layer when a client exhausted its policy window."""


class LLMAppError(AppError):
    """Raised when LLM provider/client operations fail."""

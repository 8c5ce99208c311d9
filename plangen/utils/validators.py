"""Content checks for project ideas, plan Markdown and plan ids.

These are cheap heuristics that keep obviously off-topic or abusive input
away from the LLM and the plan store. They return a result object instead of
raising so the same checks can back both the validation endpoint and the
request handlers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIN_IDEA_CHARS = 20
MAX_IDEA_CHARS = 1000
MIN_PLAN_CHARS = 100
MAX_PLAN_CHARS = 50000

PLAN_ID_PATTERN = re.compile(r"[A-Za-z0-9]{8}")

PROJECT_KEYWORDS = (
    "app",
    "website",
    "platform",
    "system",
    "application",
    "service",
    "tool",
    "dashboard",
    "api",
    "interface",
    "software",
    "program",
    "solution",
    "build",
    "create",
    "develop",
    "make",
    "design",
    "implement",
    "user",
    "client",
    "customer",
    "data",
    "database",
    "web",
    "mobile",
    "desktop",
    "cloud",
    "server",
    "frontend",
    "backend",
)

INAPPROPRIATE_PATTERNS = (
    re.compile(r"\b(hack|crack|exploit|malware|virus)\b", re.IGNORECASE),
    re.compile(r"\b(illegal|piracy|fraud|scam)\b", re.IGNORECASE),
    re.compile(r"\b(porn|adult|explicit)\b", re.IGNORECASE),
)

PLAN_STRUCTURE_PATTERNS = (
    re.compile(r"#{1,6}\s*(?:\d+\.\s*)?project", re.IGNORECASE),
    re.compile(r"#{1,6}\s*(?:\d+\.\s*)?overview", re.IGNORECASE),
    re.compile(r"#{1,6}\s*(?:\d+\.\s*)?user stor", re.IGNORECASE),
    re.compile(r"#{1,6}\s*(?:\d+\.\s*)?technical", re.IGNORECASE),
    re.compile(r"#{1,6}\s*(?:\d+\.\s*)?implementation", re.IGNORECASE),
    re.compile(r"#{1,6}\s*(?:\d+\.\s*)?milestone", re.IGNORECASE),
    re.compile(r"#{1,6}\s*(?:\d+\.\s*)?phase", re.IGNORECASE),
    re.compile(r"\*\*goal\*\*", re.IGNORECASE),
    re.compile(r"\*\*timeline\*\*", re.IGNORECASE),
    re.compile(r"- \[ \]"),
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a content check.

    Attributes:
        valid: True when the input passed every check.
        error: Human-readable reason when invalid.
        code: Machine-readable reason when invalid.
    """

    valid: bool
    error: str | None = None
    code: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, code: str, error: str) -> "ValidationResult":
        return cls(valid=False, error=error, code=code)


def validate_project_idea(
    idea: str,
    *,
    min_chars: int = MIN_IDEA_CHARS,
    max_chars: int = MAX_IDEA_CHARS,
) -> ValidationResult:
    """Check that an idea has a usable length and describes a software project.

    Args:
        idea: Free-text project idea from the user.
        min_chars: Minimum length after stripping whitespace.
        max_chars: Maximum length.

    Returns:
        ValidationResult with the first failing reason, if any.
    """
    text = idea.strip()

    if len(text) < min_chars:
        return ValidationResult.fail(
            "idea_too_short",
            f"Project idea must be at least {min_chars} characters",
        )
    if len(text) > max_chars:
        return ValidationResult.fail(
            "idea_too_long",
            f"Project idea must be less than {max_chars} characters",
        )

    lowered = text.lower()
    if not any(keyword in lowered for keyword in PROJECT_KEYWORDS):
        return ValidationResult.fail(
            "idea_off_topic",
            "Input should describe a software/technology project idea",
        )

    for pattern in INAPPROPRIATE_PATTERNS:
        if pattern.search(text):
            logger.info("validation.idea_rejected", extra={"reason": "inappropriate"})
            return ValidationResult.fail(
                "idea_inappropriate",
                "Input contains inappropriate content",
            )

    return ValidationResult.ok()


def validate_plan_content(
    content: str,
    *,
    min_chars: int = MIN_PLAN_CHARS,
    max_chars: int = MAX_PLAN_CHARS,
) -> ValidationResult:
    """Check that content is a plausibly sized Markdown project plan."""
    if len(content) < min_chars:
        return ValidationResult.fail(
            "plan_too_short",
            "Content too short to be a valid project plan",
        )
    if len(content) > max_chars:
        return ValidationResult.fail(
            "plan_too_large",
            "Content exceeds maximum size limit",
        )

    if not any(pattern.search(content) for pattern in PLAN_STRUCTURE_PATTERNS):
        return ValidationResult.fail(
            "plan_unrecognized",
            "Content does not appear to be a valid project plan",
        )

    return ValidationResult.ok()


def is_valid_plan_id(plan_id: str) -> bool:
    return PLAN_ID_PATTERN.fullmatch(plan_id) is not None

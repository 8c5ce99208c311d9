"""Project plan generation service.

Turns a short idea into a Markdown project plan by:
- validating the idea (length, topic, content policy)
- building a template-aware prompt
- calling the configured LLM client
"""

from __future__ import annotations

import logging
from typing import Literal

from plangen.adapters.llm.base import AbstractLLMClient
from plangen.core.config import settings
from plangen.core.errors import LLMAppError, ValidationAppError
from plangen.utils.validators import validate_project_idea

logger = logging.getLogger(__name__)

Template = Literal["next", "vercel-ai"]
TEMPLATES: tuple[str, ...] = ("next", "vercel-ai")
DEFAULT_TEMPLATE: Template = "next"

_BASE_PROMPT = """You are an expert project manager and technical lead specializing in creating EXECUTABLE project plans. Your goal is to transform ideas into actionable plans with specific user stories, clear acceptance criteria, and tasks that can be marked as complete.

CRITICAL: Focus on creating a plan that a developer can immediately execute, with each task having clear "done" criteria."""

_TEMPLATE_CONTEXT: dict[str, str] = {
    "next": """TECHNICAL CONTEXT: This project will be created using create-vibe-code-app with the Next.js template:
- Next.js 14 with App Router and TypeScript
- Tailwind CSS for styling
- ESLint & Prettier configuration
- AI assistant configuration (.cursor/rules/)
- Modern React patterns and hooks

OPTIMIZATION: Structure your recommendations around this Next.js stack. Include specific file paths, component structures, and Next.js best practices.""",
    "vercel-ai": """TECHNICAL CONTEXT: This project will be created using create-vibe-code-app with the Vercel AI template:
- Next.js 14 with App Router and TypeScript
- Tailwind CSS for styling
- Vercel AI SDK pre-configured with OpenAI
- Streaming chat responses and AI hooks
- AI assistant configuration (.cursor/rules/)

OPTIMIZATION: Focus heavily on AI-powered features. Include specific recommendations for OpenAI integration, prompt engineering, function calling, RAG patterns, and AI UX best practices.""",
}

_STRUCTURE = """STRUCTURE YOUR RESPONSE with these EXACT sections:

## 1. Project Overview
- **Goal**: One clear sentence describing the main objective
- **Success Metrics**: 2-3 measurable outcomes
- **Timeline**: Estimated completion time

## 2. User Stories & Acceptance Criteria
Create 5-8 user stories, each with 3-5 testable acceptance criteria as checkboxes.

## 3. Technical Implementation Plan
Break the work into phases (Foundation, Core Features, Polish & Deploy) of
checkbox tasks, each with **Details** and **Done when** lines.

## 4. Technical Architecture
File structure, key components, API endpoints and database schema (if applicable).

## 5. Risk Assessment & Mitigation
A table with Risk, Impact, Probability and Mitigation Strategy columns.

## 6. Next Steps (Immediate Actions)
First 30 minutes, first day and first week.

REQUIREMENTS:
- Use checkboxes [ ] for all actionable items
- Be specific about file names, component names, and implementation details
- Make each task small enough to complete in 1-4 hours
- Respond with the Markdown plan only
- Focus on {focus}

User idea: """


def build_prompt(idea: str, template: str = DEFAULT_TEMPLATE) -> str:
    """Build the plan generation prompt for an idea.

    Args:
        idea: Validated project idea.
        template: Scaffolding template the plan should target.

    Returns:
        Prompt string ending with the user idea.

    Raises:
        ValidationAppError: If the template is unknown.
    """
    if template not in _TEMPLATE_CONTEXT:
        raise ValidationAppError(
            code="unknown_template",
            message=f"Unknown template '{template}'. Supported: {', '.join(TEMPLATES)}",
            details={"template": template},
        )

    focus = (
        "AI-powered features and OpenAI integration"
        if template == "vercel-ai"
        else "modern web development patterns"
    )
    return "\n\n".join(
        [
            _BASE_PROMPT,
            _TEMPLATE_CONTEXT[template],
            _STRUCTURE.format(focus=focus),
        ]
    ) + idea.strip()


class PlanService:
    """Generate project plans with an LLM.

    Attributes:
        llm: LLM client, or None when no provider is configured.
    """

    def __init__(self, llm: AbstractLLMClient | None) -> None:
        self.llm = llm

    def _validate_idea(self, idea: str) -> None:
        result = validate_project_idea(
            idea,
            min_chars=settings.app.min_idea_chars,
            max_chars=settings.app.max_idea_chars,
        )
        if not result.valid:
            raise ValidationAppError(
                code=result.code or "invalid_idea",
                message=result.error or "Invalid project idea",
            )

    async def generate(self, idea: str, template: str = DEFAULT_TEMPLATE) -> str:
        """Generate a Markdown plan for an idea.

        Args:
            idea: Free-text project idea.
            template: Scaffolding template to target.

        Returns:
            Plan Markdown.

        Raises:
            ValidationAppError: If the idea or template is invalid.
            LLMAppError: If no LLM is configured or the call fails.
        """
        self._validate_idea(idea)
        prompt = build_prompt(idea, template)

        if self.llm is None:
            raise LLMAppError(
                code="llm_not_configured",
                message="LLM provider is not configured",
                details={"hint": "Set LLM_API_KEY"},
            )

        plan = await self.llm.generate_text(prompt)

        logger.info(
            "plan.generated",
            extra={
                "template": template,
                "idea_length": len(idea),
                "plan_length": len(plan),
                "model": getattr(self.llm, "model", None),
            },
        )
        return plan

"""Unit tests for PlanService and prompt construction."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from plangen.core.errors import LLMAppError, ValidationAppError
from plangen.services.plan_service import PlanService, build_prompt

IDEA = "A web app that lets small teams track tasks and deadlines"


class TestBuildPrompt:
    def test_prompt_ends_with_idea(self) -> None:
        prompt = build_prompt(f"  {IDEA}  ")

        assert prompt.endswith(f"User idea: {IDEA}")

    def test_next_template_context(self) -> None:
        prompt = build_prompt(IDEA, "next")

        assert "Next.js template" in prompt
        assert "modern web development patterns" in prompt
        assert "Vercel AI SDK" not in prompt

    def test_vercel_ai_template_context(self) -> None:
        prompt = build_prompt(IDEA, "vercel-ai")

        assert "Vercel AI SDK" in prompt
        assert "AI-powered features and OpenAI integration" in prompt

    def test_prompt_lists_required_sections(self) -> None:
        prompt = build_prompt(IDEA)

        for section in (
            "## 1. Project Overview",
            "## 2. User Stories & Acceptance Criteria",
            "## 3. Technical Implementation Plan",
            "## 4. Technical Architecture",
            "## 5. Risk Assessment & Mitigation",
            "## 6. Next Steps",
        ):
            assert section in prompt

    def test_unknown_template_rejected(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            build_prompt(IDEA, "django")

        assert exc_info.value.code == "unknown_template"


class TestPlanService:
    @pytest.fixture
    def llm(self, sample_plan: str) -> MagicMock:
        client = MagicMock()
        client.model = "gpt-4"
        client.generate_text = AsyncMock(return_value=sample_plan)
        return client

    @pytest.mark.asyncio
    async def test_generate_returns_plan(self, llm: MagicMock, sample_plan: str) -> None:
        service = PlanService(llm=llm)

        plan = await service.generate(IDEA, "vercel-ai")

        assert plan == sample_plan
        prompt = llm.generate_text.await_args.args[0]
        assert prompt.endswith(IDEA)
        assert "Vercel AI SDK" in prompt

    @pytest.mark.asyncio
    async def test_invalid_idea_skips_llm(self, llm: MagicMock) -> None:
        service = PlanService(llm=llm)

        with pytest.raises(ValidationAppError) as exc_info:
            await service.generate("too short")

        assert exc_info.value.code == "idea_too_short"
        llm.generate_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_llm_raises(self) -> None:
        service = PlanService(llm=None)

        with pytest.raises(LLMAppError) as exc_info:
            await service.generate(IDEA)

        assert exc_info.value.code == "llm_not_configured"

    @pytest.mark.asyncio
    async def test_llm_errors_propagate(self, llm: MagicMock) -> None:
        llm.generate_text.side_effect = LLMAppError(code="llm_request_failed", message="down")
        service = PlanService(llm=llm)

        with pytest.raises(LLMAppError):
            await service.generate(IDEA)

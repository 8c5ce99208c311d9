"""Tests for the LLM adapter layer."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from plangen.adapters.llm import OpenAIClient, create_llm_client
from plangen.core.config import LLMSettings
from plangen.core.errors import LLMAppError, ValidationAppError


def _completion(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


class TestOpenAIClient:
    @pytest.mark.asyncio
    async def test_generate_text_success(self) -> None:
        client = OpenAIClient(api_key="test-key-123", model="gpt-4")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion("  # Plan\n- [ ] Task 1\n"),
        ) as mock_create:
            result = await client.generate_text("Make a plan")

        assert result == "# Plan\n- [ ] Task 1"
        kwargs = mock_create.call_args.kwargs
        assert kwargs["model"] == "gpt-4"
        assert kwargs["messages"] == [{"role": "user", "content": "Make a plan"}]
        assert kwargs["max_tokens"] == 2000
        assert kwargs["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_overrides_and_passthrough_params(self) -> None:
        client = OpenAIClient(api_key="k", model="gpt-4")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion("plan"),
        ) as mock_create:
            await client.generate_text("p", temperature=0.1, seed=7, unknown="dropped")

        kwargs = mock_create.call_args.kwargs
        assert kwargs["temperature"] == 0.1
        assert kwargs["seed"] == 7
        assert "unknown" not in kwargs

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "   "])
    async def test_empty_completion_raises(self, content: str | None) -> None:
        client = OpenAIClient(api_key="k", model="gpt-4")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(content),
        ):
            with pytest.raises(LLMAppError) as exc_info:
                await client.generate_text("p")

        assert exc_info.value.code == "llm_empty_response"

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self) -> None:
        client = OpenAIClient(api_key="k", model="gpt-4")
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=openai.APIConnectionError(request=request),
        ):
            with pytest.raises(LLMAppError) as exc_info:
                await client.generate_text("p")

        assert exc_info.value.code == "llm_request_failed"
        assert exc_info.value.details["hint"] == "APIConnectionError"


class TestFactory:
    def test_creates_openai_client(self) -> None:
        client = create_llm_client(LLMSettings(provider="openai", model="gpt-4o", api_key="k"))

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-4o"

    def test_missing_api_key(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_llm_client(LLMSettings(provider="openai", model="gpt-4", api_key=None))

        assert exc_info.value.code == "llm_missing_api_key"

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_llm_client(LLMSettings(provider="ollama", model="llama3", api_key="k"))

        assert exc_info.value.code == "llm_unknown_provider"

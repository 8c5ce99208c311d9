"""OpenAI LLM client adapter."""

from typing import Any

from openai import AsyncOpenAI, OpenAIError

from plangen.adapters.llm.base import AbstractLLMClient
from plangen.core.errors import LLMAppError


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions returning plain text.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4", "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
            max_tokens: Default completion token cap.
            temperature: Default sampling temperature.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate_text(self, prompt: str, **kwargs: Any) -> str:
        """Generate a completion using OpenAI chat completions.

        Args:
            prompt: User prompt to send to the model.
            **kwargs: Provider options (temperature, max_tokens, top_p, etc.).

        Returns:
            str: Completion text.

        Raises:
            LLMAppError: If the API call fails or the response is empty.
        """
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": kwargs.pop("temperature", self.temperature),
            "max_tokens": kwargs.pop("max_tokens", self.max_tokens),
        }

        allowed_params = {"top_p", "frequency_penalty", "presence_penalty", "seed"}
        for param in allowed_params:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except OpenAIError as exc:
            raise LLMAppError(
                code="llm_request_failed",
                message="Failed to generate plan. Please try again.",
                details={"model": self.model, "hint": type(exc).__name__},
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise LLMAppError(
                code="llm_empty_response",
                message="Failed to generate plan",
                details={"model": self.model},
            )

        return content.strip()

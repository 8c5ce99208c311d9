from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for LLM clients that produce free-form text completions."""

	model: str

	@abstractmethod
	async def generate_text(
		self,
		prompt: str,
		**kwargs: Any,
	) -> str:
		"""Generate a text completion for a single user prompt.

		Args:
			prompt: Full prompt to send to the model.
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			str: Completion text, stripped of surrounding whitespace.

		Raises:
			LLMAppError: If the provider call fails or returns no content.
		"""
		...

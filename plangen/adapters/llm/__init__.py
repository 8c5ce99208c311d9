"""LLM adapter layer - abstracts over LLM providers."""

from plangen.adapters.llm.base import AbstractLLMClient
from plangen.adapters.llm.factory import create_llm_client
from plangen.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]

"""LLM providers."""

from ollabot.core.providers.base import BaseLLMProvider, LLMError
from ollabot.core.providers.litellm_llm import LiteLLMLLM

__all__ = ["BaseLLMProvider", "LLMError", "LiteLLMLLM"]

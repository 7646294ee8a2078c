"""LiteLLM provider: local Ollama models via ``ollama_chat/*``."""

from __future__ import annotations

from typing import Any

import litellm
from langchain_core.messages import AIMessage
from loguru import logger

from ollabot.core.providers.base import BaseLLMProvider, LLMError

litellm.suppress_debug_info = True


class LiteLLMLLM(BaseLLMProvider):
    """LiteLLM-backed provider."""

    async def achat(
        self,
        messages: list[dict[str, Any]],
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 512,
        api_base: str | None = None,
        response_format: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> AIMessage:
        """Call LiteLLM and return a LangChain AIMessage."""
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if api_base:
            kwargs["api_base"] = api_base
        if response_format:
            kwargs["response_format"] = response_format
        if timeout:
            kwargs["timeout"] = timeout

        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as e:
            logger.error(f"LLM error ({model}): {e}")
            raise LLMError(str(e)) from e
        return self._to_ai_message(response)

    @staticmethod
    def _to_ai_message(response: Any) -> AIMessage:
        """Convert litellm response to LangChain AIMessage."""
        choice = response.choices[0]
        msg = choice.message
        usage = getattr(response, "usage", None)
        return AIMessage(
            content=msg.content or "",
            response_metadata={
                "finish_reason": choice.finish_reason or "stop",
                "usage": {
                    "prompt_tokens": getattr(usage, "prompt_tokens", 0),
                    "completion_tokens": getattr(usage, "completion_tokens", 0),
                    "total_tokens": getattr(usage, "total_tokens", 0),
                },
            },
        )

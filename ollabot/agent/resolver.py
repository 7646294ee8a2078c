"""IntentResolver: one LLM call that turns a transcript into the next intent."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Protocol

from loguru import logger
from pydantic import ValidationError

from ollabot.agent.errors import ResolutionError
from ollabot.agent.models import Intent, parse_intent
from ollabot.core.providers.base import BaseLLMProvider, LLMError
from ollabot.core.providers.litellm_llm import LiteLLMLLM

if TYPE_CHECKING:
    from ollabot.core.config.schema import Config


class IntentResolver(Protocol):
    """Anything that maps ``(transcript, model)`` to an intent.

    Implementations raise ``ResolutionError`` on every failure.
    """

    async def resolve(self, transcript: str, model: str) -> Intent: ...


_SYSTEM_PROMPT = """\
You are a helpful assistant that can perform calculations and manage Ollama models.
Read the conversation thread and decide the single next step.

## Thread format
Each entry is wrapped in a tag naming its kind:
<user_input>, <tool_call> (a step you already chose), <tool_response>
(the result of that step) and <error>.

## Possible next steps (pick exactly one)
- {{"intent": "add", "a": <number>, "b": <number>}}
- {{"intent": "subtract", "a": <number>, "b": <number>}}
- {{"intent": "multiply", "a": <number>, "b": <number>}}
- {{"intent": "divide", "a": <number>, "b": <number>}}
- {{"intent": "list_models"}}
- {{"intent": "select_model", "model_name": "<model tag, e.g. mistral:7b>"}}
- {{"intent": "request_more_information", "message": "<question for the user>"}}
- {{"intent": "done_for_now", "message": "<final answer for the user>"}}

## Rules
- If the latest <tool_response> already answers the user, reply with done_for_now.
- If the request is ambiguous, reply with request_more_information.
- Only use numbers that appear in the thread or results of earlier steps.
- Return ONLY one JSON object, no markdown, no commentary.

Current model: {model}
"""


class LLMIntentResolver:
    """Resolve intents with a local Ollama model through LiteLLM.

    Parameters
    ----------
    config : Config
        Application config (resolver and Ollama sections).
    provider : BaseLLMProvider, optional
        LLM backend. Defaults to ``LiteLLMLLM``.
    base_url : str, optional
        Ollama endpoint; defaults to ``config.ollama.base_url``. Reducers pass
        their own state's endpoint here.
    """

    def __init__(
        self,
        config: Config,
        provider: BaseLLMProvider | None = None,
        base_url: str | None = None,
    ) -> None:
        self.config = config
        self.provider = provider or LiteLLMLLM()
        self.base_url = (base_url or config.base_url).rstrip("/")

    async def resolve(self, transcript: str, model: str) -> Intent:
        messages = [
            {"role": "system", "content": _SYSTEM_PROMPT.format(model=model)},
            {"role": "user", "content": transcript},
        ]
        settings = self.config.resolver
        llm_model = self.config.litellm_model(model)
        logger.debug(f"Resolver call: model={llm_model}, transcript={len(transcript)} chars")
        try:
            response = await self.provider.achat(
                messages=messages,
                model=llm_model,
                temperature=settings.temperature,
                max_tokens=settings.max_tokens,
                api_base=self.base_url,
                response_format={"type": "json_object"},
                timeout=settings.timeout,
            )
        except LLMError as e:
            raise ResolutionError(f"Intent resolution failed: {e}") from e

        content = response.content if isinstance(response.content, str) else ""
        logger.debug(f"Resolver raw: {content[:200]}")
        return self._parse(content)

    @staticmethod
    def _parse(text: str) -> Intent:
        """Parse the JSON intent; strip markdown fences some models add."""
        clean = text.strip()
        if not clean:
            raise ResolutionError("Intent resolution failed: empty model output")
        if "```" in clean:
            parts = clean.split("```")
            if len(parts) >= 3:
                clean = parts[1]
                if clean.startswith("json"):
                    clean = clean[4:]
        try:
            data = json.loads(clean.strip())
        except json.JSONDecodeError as e:
            raise ResolutionError(f"Model returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ResolutionError(f"Model returned {type(data).__name__}, expected an object")
        try:
            return parse_intent(data)
        except ValidationError as e:
            raise ResolutionError(f"Model returned an invalid intent: {e}") from e

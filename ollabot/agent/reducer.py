"""AgentReducer: the per-turn transition from user input to recorded result."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from loguru import logger

from ollabot.agent.context import ContextLog
from ollabot.agent.dispatcher import ToolDispatcher
from ollabot.agent.errors import ResolutionError
from ollabot.agent.models import (
    ClarificationResult,
    Intent,
    RequestMoreInformation,
    Result,
)
from ollabot.agent.resolver import IntentResolver, LLMIntentResolver
from ollabot.agent.state import AgentState, new_thread_id
from ollabot.core.ollama.catalog import ModelCatalog

if TYPE_CHECKING:
    from ollabot.core.config.schema import Config

CLARIFICATION_MESSAGE = (
    "I encountered an issue processing your request. "
    "Could you please rephrase or try again?"
)
TRUNCATION_MARKER = "..."


def compact_error(message: str, limit: int = 200) -> str:
    """Cut an error message to ``limit`` chars plus a marker."""
    if len(message) <= limit:
        return message
    return message[:limit] + TRUNCATION_MARKER


class AgentReducer:
    """
    Owns one ``AgentState`` and advances it one turn per ``step`` call.

    Flow:
        1. Append user input to the context
        2. Render the context and ask the resolver for the next intent
        3. Resolver failed → record the compacted error, answer with a
           clarification, stop
        4. Record the intent, dispatch it (dispatch errors propagate)
        5. Record the result

    Not safe for concurrent ``step`` calls on one instance; callers
    serialize per thread (see ``ThreadRegistry``).
    """

    def __init__(
        self,
        state: AgentState,
        resolver: IntentResolver,
        dispatcher: ToolDispatcher,
        error_max_chars: int = 200,
    ) -> None:
        self._state = state
        self.resolver = resolver
        self.dispatcher = dispatcher
        self.error_max_chars = error_max_chars

    @classmethod
    def from_state(
        cls,
        state: AgentState,
        resolver: IntentResolver,
        dispatcher: ToolDispatcher,
        error_max_chars: int = 200,
    ) -> AgentReducer:
        return cls(state, resolver, dispatcher, error_max_chars=error_max_chars)

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def context(self) -> ContextLog:
        return self._state.context

    def get_state(self) -> dict[str, Any]:
        return self._state.snapshot()

    async def step(self, user_input: str) -> tuple[Intent, Result]:
        """Run one turn and return ``(intent, result)``.

        Raises
        ------
        DispatchError
            The resolved intent could not be carried out.
        """
        context = self._state.context
        context.append("user_input", user_input)
        transcript = context.render()

        try:
            intent = await self.resolver.resolve(transcript, self._state.current_model)
        except ResolutionError as e:
            return self._degrade(e)
        except Exception as e:
            logger.exception(f"Unexpected resolver failure in {self._state.thread_id}")
            return self._degrade(e)

        context.append("tool_call", intent.model_dump_json())
        result = await self.dispatcher.dispatch(intent, self._state)
        context.append("tool_response", result.model_dump_json())
        return intent, result

    async def execute(self, intent: Intent | Mapping[str, Any]) -> Result:
        """Dispatch an intent outside a resolver turn and record its result."""
        result = await self.dispatcher.dispatch(intent, self._state)
        self._state.context.append("tool_response", result.model_dump_json())
        return result

    async def check_health(self) -> bool:
        return await self.dispatcher.catalog.check_health()

    def _degrade(self, error: Exception) -> tuple[Intent, Result]:
        detail = str(error) or type(error).__name__
        logger.warning(f"Resolver failed for {self._state.thread_id}: {detail[:120]}")
        self._state.context.append("error", compact_error(detail, self.error_max_chars))
        intent = RequestMoreInformation(message=CLARIFICATION_MESSAGE)
        return intent, ClarificationResult(message=intent.message)


def create_reducer(
    config: Config,
    model: str | None = None,
    thread_id: str | None = None,
    resolver: IntentResolver | None = None,
    catalog: ModelCatalog | None = None,
) -> AgentReducer:
    """Build a reducer with a fresh state from config.

    ``model`` overrides ``agent.default_model``; ``resolver`` and ``catalog``
    default to the LiteLLM resolver and the Ollama catalog for the configured
    endpoint.
    """
    endpoint = config.base_url
    state = AgentState(
        current_model=model or config.agent.default_model,
        service_endpoint=endpoint,
        thread_id=thread_id or new_thread_id(),
        context=ContextLog(
            max_entries=config.agent.context.max_entries,
            retain_entries=config.agent.context.retain_entries,
        ),
    )
    catalog = catalog or ModelCatalog(endpoint, timeout=config.ollama.timeout)
    resolver = resolver or LLMIntentResolver(config, base_url=endpoint)
    return AgentReducer(
        state,
        resolver,
        ToolDispatcher(catalog),
        error_max_chars=config.agent.error_max_chars,
    )

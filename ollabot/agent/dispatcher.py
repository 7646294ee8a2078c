"""ToolDispatcher: executes an intent and returns a structured result."""

from __future__ import annotations

import operator
from typing import Any, Callable, Mapping

from loguru import logger
from pydantic import ValidationError

from ollabot.agent.errors import DivisionByZero, UnknownIntent, UnknownModel
from ollabot.agent.models import (
    AddIntent,
    CalculationInputs,
    CalculationResult,
    CalculatorIntent,
    ClarificationResult,
    DivideIntent,
    DoneForNow,
    FinalResponse,
    Intent,
    ListModelsIntent,
    ModelListResult,
    ModelSelectedResult,
    ModelSummary,
    MultiplyIntent,
    Number,
    RequestMoreInformation,
    Result,
    SelectModelIntent,
    SubtractIntent,
    parse_intent,
)
from ollabot.agent.state import AgentState
from ollabot.core.ollama.catalog import ModelCatalog

_ARITHMETIC: dict[type, tuple[str, Callable[[Number, Number], Number]]] = {
    AddIntent: ("addition", operator.add),
    SubtractIntent: ("subtraction", operator.sub),
    MultiplyIntent: ("multiplication", operator.mul),
    DivideIntent: ("division", operator.truediv),
}


class ToolDispatcher:
    """Map each intent variant to its effect.

    Calculations are pure, ``list_models`` / ``select_model`` query the
    catalog (fresh on every call), and the two conversational intents just
    wrap their message. Recording the result in the context is the caller's
    job.
    """

    def __init__(self, catalog: ModelCatalog) -> None:
        self.catalog = catalog

    async def dispatch(self, intent: Intent | Mapping[str, Any], state: AgentState) -> Result:
        if isinstance(intent, Mapping):
            intent = self._coerce(intent)

        if isinstance(intent, (AddIntent, SubtractIntent, MultiplyIntent, DivideIntent)):
            return self.calculate(intent)
        if isinstance(intent, ListModelsIntent):
            return await self.list_models(state)
        if isinstance(intent, SelectModelIntent):
            return await self.select_model(intent.model_name, state)
        if isinstance(intent, RequestMoreInformation):
            return ClarificationResult(message=intent.message)
        if isinstance(intent, DoneForNow):
            return FinalResponse(message=intent.message)
        raise UnknownIntent(getattr(intent, "intent", type(intent).__name__))

    @staticmethod
    def _coerce(raw: Mapping[str, Any]) -> Intent:
        try:
            return parse_intent(dict(raw))
        except ValidationError as e:
            tag = raw.get("intent")
            # A known tag with bad fields is still a contract violation.
            logger.warning(f"Rejected intent {tag!r}: {e.error_count()} validation errors")
            raise UnknownIntent(tag) from e

    @staticmethod
    def calculate(intent: CalculatorIntent) -> CalculationResult:
        name, func = _ARITHMETIC[type(intent)]
        a, b = intent.a, intent.b
        if isinstance(intent, DivideIntent) and b == 0:
            raise DivisionByZero(a)
        result = func(a, b)
        return CalculationResult(
            operation=name,
            inputs=CalculationInputs(a=a, b=b),
            result=result,
            message=f"The {name} of {a} and {b} is {result}.",
        )

    async def list_models(self, state: AgentState) -> ModelListResult:
        models = await self.catalog.list()
        return ModelListResult(
            models=[
                ModelSummary(
                    name=m.name,
                    size=m.size,
                    family=m.family,
                    display=self.catalog.format_for_display(m),
                )
                for m in models
            ],
            recommendations=self.catalog.recommendations(),
            current_model=state.current_model,
            message=f"Found {len(models)} available models. Current model: {state.current_model}",
        )

    async def select_model(self, model_name: str, state: AgentState) -> ModelSelectedResult:
        available = await self.catalog.names()
        if model_name not in available:
            raise UnknownModel(model_name, available)

        previous = state.current_model
        state.current_model = model_name
        logger.info(f"Thread {state.thread_id}: model {previous} -> {model_name}")
        return ModelSelectedResult(
            previous_model=previous,
            new_model=model_name,
            message=(
                f"Successfully switched from '{previous}' to '{model_name}'. "
                "The new model will be used for subsequent interactions."
            ),
        )

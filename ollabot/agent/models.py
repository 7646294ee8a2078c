"""Pydantic models: intents the resolver emits and results the dispatcher returns."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import AfterValidator, BaseModel, Field, TypeAdapter

Number = Union[int, float]


def _float_range(value: Number) -> Number:
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError as e:
            raise ValueError("number is outside the floating point range") from e
    return value


# Operands must convert to float so mixed int/float arithmetic cannot overflow.
Operand = Annotated[Number, AfterValidator(_float_range)]


# ════════════════════════════════════════════════════════════
# INTENTS (discriminated on ``intent``)
# ════════════════════════════════════════════════════════════


class AddIntent(BaseModel):
    intent: Literal["add"] = "add"
    a: Operand
    b: Operand


class SubtractIntent(BaseModel):
    intent: Literal["subtract"] = "subtract"
    a: Operand
    b: Operand


class MultiplyIntent(BaseModel):
    intent: Literal["multiply"] = "multiply"
    a: Operand
    b: Operand


class DivideIntent(BaseModel):
    intent: Literal["divide"] = "divide"
    a: Operand
    b: Operand


class ListModelsIntent(BaseModel):
    intent: Literal["list_models"] = "list_models"


class SelectModelIntent(BaseModel):
    intent: Literal["select_model"] = "select_model"
    model_name: str = Field(min_length=1)


class RequestMoreInformation(BaseModel):
    """Ask the user to clarify."""

    intent: Literal["request_more_information"] = "request_more_information"
    message: str


class DoneForNow(BaseModel):
    """Terminal answer for this turn."""

    intent: Literal["done_for_now"] = "done_for_now"
    message: str


CalculatorIntent = Union[AddIntent, SubtractIntent, MultiplyIntent, DivideIntent]

Intent = Annotated[
    Union[
        AddIntent,
        SubtractIntent,
        MultiplyIntent,
        DivideIntent,
        ListModelsIntent,
        SelectModelIntent,
        RequestMoreInformation,
        DoneForNow,
    ],
    Field(discriminator="intent"),
]

INTENT_ADAPTER: TypeAdapter[Intent] = TypeAdapter(Intent)


def parse_intent(data: Any) -> Intent:
    """Validate a dict (or JSON string) into one intent variant.

    Raises ``pydantic.ValidationError`` on unknown tags or missing fields.
    """
    if isinstance(data, (str, bytes)):
        return INTENT_ADAPTER.validate_json(data)
    return INTENT_ADAPTER.validate_python(data)


# ════════════════════════════════════════════════════════════
# RESULTS
# ════════════════════════════════════════════════════════════


class CalculationInputs(BaseModel):
    a: Number
    b: Number


class CalculationResult(BaseModel):
    type: Literal["calculation_result"] = "calculation_result"
    operation: str
    inputs: CalculationInputs
    result: Number
    message: str


class ModelSummary(BaseModel):
    name: str
    size: int = 0
    family: str = "unknown"
    display: str = ""


class ModelListResult(BaseModel):
    type: Literal["model_list"] = "model_list"
    models: list[ModelSummary] = Field(default_factory=list)
    recommendations: dict[str, list[str]] = Field(default_factory=dict)
    current_model: str
    message: str


class ModelSelectedResult(BaseModel):
    type: Literal["model_selected"] = "model_selected"
    previous_model: str
    new_model: str
    message: str


class ClarificationResult(BaseModel):
    type: Literal["clarification_needed"] = "clarification_needed"
    message: str


class FinalResponse(BaseModel):
    type: Literal["final_response"] = "final_response"
    message: str


Result = Union[
    CalculationResult,
    ModelListResult,
    ModelSelectedResult,
    ClarificationResult,
    FinalResponse,
]

"""Tests for ollabot.agent.dispatcher: one test group per intent family."""

import httpx
import pytest
from pydantic import ValidationError

from ollabot.agent.dispatcher import ToolDispatcher
from ollabot.agent.errors import (
    CatalogUnavailable,
    DivisionByZero,
    UnknownIntent,
    UnknownModel,
)
from ollabot.agent.models import (
    AddIntent,
    DivideIntent,
    DoneForNow,
    ListModelsIntent,
    MultiplyIntent,
    RequestMoreInformation,
    SelectModelIntent,
    SubtractIntent,
)
from ollabot.agent.state import AgentState
from ollabot.core.ollama.catalog import ModelCatalog


def _catalog(names=("llama3.1:8b", "mistral:7b"), calls=None) -> ModelCatalog:
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request.url.path)
        return httpx.Response(
            200,
            json={"models": [{"name": n, "size": 2 * 1024**3, "details": {"family": "llama"}} for n in names]},
        )

    return ModelCatalog("http://ollama.test", transport=httpx.MockTransport(handler))


def _down_catalog() -> ModelCatalog:
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    return ModelCatalog("http://ollama.test", transport=httpx.MockTransport(handler))


@pytest.fixture
def state():
    return AgentState(current_model="llama3.1:8b", service_endpoint="http://ollama.test")


@pytest.fixture
def dispatcher():
    return ToolDispatcher(_catalog())


# ── Arithmetic ──────────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "intent, operation, expected",
    [
        (AddIntent(a=2, b=3), "addition", 5),
        (SubtractIntent(a=10, b=4), "subtraction", 6),
        (MultiplyIntent(a=2.5, b=4), "multiplication", 10),
        (DivideIntent(a=10, b=2), "division", 5),
    ],
)
async def test_arithmetic(dispatcher, state, intent, operation, expected):
    result = await dispatcher.dispatch(intent, state)
    assert result.type == "calculation_result"
    assert result.operation == operation
    assert result.result == expected
    assert result.inputs.a == intent.a
    assert result.inputs.b == intent.b


@pytest.mark.asyncio
async def test_calculation_message(dispatcher, state):
    result = await dispatcher.dispatch(AddIntent(a=2, b=3), state)
    assert result.message == "The addition of 2 and 3 is 5."


@pytest.mark.asyncio
async def test_divide_by_zero(dispatcher, state):
    with pytest.raises(DivisionByZero):
        await dispatcher.dispatch({"intent": "divide", "a": 5, "b": 0}, state)


@pytest.mark.asyncio
async def test_divide_from_dict(dispatcher, state):
    result = await dispatcher.dispatch({"intent": "divide", "a": 10, "b": 2}, state)
    assert result.result == 5


# ── Model catalog ───────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_models(dispatcher, state):
    result = await dispatcher.dispatch(ListModelsIntent(), state)
    assert result.type == "model_list"
    assert [m.name for m in result.models] == ["llama3.1:8b", "mistral:7b"]
    assert result.models[0].display == "llama3.1:8b (llama, 2.0GB)"
    assert result.current_model == "llama3.1:8b"
    assert "General Chat" in result.recommendations
    assert result.message == "Found 2 available models. Current model: llama3.1:8b"


@pytest.mark.asyncio
async def test_list_models_unavailable(state):
    with pytest.raises(CatalogUnavailable):
        await ToolDispatcher(_down_catalog()).dispatch(ListModelsIntent(), state)


@pytest.mark.asyncio
async def test_select_model_round_trip(dispatcher, state):
    result = await dispatcher.dispatch(
        {"intent": "select_model", "model_name": "mistral:7b"}, state
    )
    assert result.type == "model_selected"
    assert result.previous_model == "llama3.1:8b"
    assert result.new_model == "mistral:7b"
    assert state.current_model == "mistral:7b"
    assert state.snapshot()["current_model"] == "mistral:7b"


@pytest.mark.asyncio
async def test_select_unknown_model(dispatcher, state):
    with pytest.raises(UnknownModel) as exc:
        await dispatcher.dispatch(SelectModelIntent(model_name="unknown:1b"), state)
    assert exc.value.available == ["llama3.1:8b", "mistral:7b"]
    assert "llama3.1:8b, mistral:7b" in str(exc.value)
    assert state.current_model == "llama3.1:8b"


@pytest.mark.asyncio
async def test_select_queries_catalog_every_time(state):
    calls = []
    dispatcher = ToolDispatcher(_catalog(calls=calls))
    await dispatcher.dispatch(SelectModelIntent(model_name="mistral:7b"), state)
    await dispatcher.dispatch(SelectModelIntent(model_name="llama3.1:8b"), state)
    assert calls == ["/api/tags", "/api/tags"]


# ── Conversational ──────────────────────────────────────────


@pytest.mark.asyncio
async def test_request_more_information(dispatcher, state):
    result = await dispatcher.dispatch(RequestMoreInformation(message="Which numbers?"), state)
    assert result.type == "clarification_needed"
    assert result.message == "Which numbers?"


@pytest.mark.asyncio
async def test_done_for_now(dispatcher, state):
    result = await dispatcher.dispatch(DoneForNow(message="The answer is 5."), state)
    assert result.type == "final_response"
    assert result.message == "The answer is 5."


# ── Contract violations ─────────────────────────────────────


@pytest.mark.asyncio
async def test_unknown_intent_tag(dispatcher, state):
    with pytest.raises(UnknownIntent) as exc:
        await dispatcher.dispatch({"intent": "sqrt", "a": 9}, state)
    assert exc.value.tag == "sqrt"


@pytest.mark.asyncio
async def test_unknown_intent_object(dispatcher, state):
    with pytest.raises(UnknownIntent):
        await dispatcher.dispatch(object(), state)


# ── Operand range ───────────────────────────────────────────


def test_operand_outside_float_range_rejected():
    with pytest.raises(ValidationError):
        AddIntent(a=10**400, b=0.5)
    with pytest.raises(ValidationError):
        DivideIntent(a=10**400, b=3)


@pytest.mark.asyncio
async def test_large_operand_mapping_is_unknown_intent(dispatcher, state):
    with pytest.raises(UnknownIntent):
        await dispatcher.dispatch({"intent": "add", "a": 10**400, "b": 0.5}, state)


@pytest.mark.asyncio
async def test_largest_float_range_operands(dispatcher, state):
    result = await dispatcher.dispatch(MultiplyIntent(a=10**300, b=10**300), state)
    assert result.result == 10**600
    result = await dispatcher.dispatch(AddIntent(a=10**300, b=0.5), state)
    assert result.result == float(10**300)

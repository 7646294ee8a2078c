"""Thread API routes: create, continue, inspect, switch model, delete."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from ollabot import __version__
from ollabot.agent.errors import (
    CatalogUnavailable,
    DispatchError,
    DivisionByZero,
    UnknownIntent,
    UnknownModel,
)
from ollabot.agent.models import SelectModelIntent
from ollabot.agent.reducer import AgentReducer
from ollabot.agent.state import new_thread_id
from ollabot.agent.threads import ThreadRegistry, ThreadSlot
from ollabot.api.deps import build_reducer, get_catalog, get_slot, get_threads
from ollabot.api.models import (
    ContinueRequest,
    ExecuteRequest,
    ExecuteResponse,
    HealthResponse,
    ModelChangeRequest,
    ModelChangeResponse,
    ModelInfo,
    ModelsResponse,
    StepResponse,
    ThreadCreateRequest,
    ThreadListResponse,
    ThreadStateResponse,
)
from ollabot.core.ollama.catalog import ModelCatalog

router = APIRouter()


def _raise_http(error: DispatchError) -> NoReturn:
    """Map a surfaced dispatch error to an HTTP error."""
    if isinstance(error, UnknownModel):
        raise HTTPException(
            status_code=400,
            detail={"message": str(error), "available_models": error.available},
        ) from error
    if isinstance(error, DivisionByZero):
        raise HTTPException(status_code=400, detail=str(error)) from error
    if isinstance(error, CatalogUnavailable):
        raise HTTPException(status_code=503, detail=str(error)) from error
    if isinstance(error, UnknownIntent):
        logger.error(f"Dispatcher rejected intent: {error}")
    raise HTTPException(status_code=500, detail=str(error)) from error


async def _step(
    reducer: AgentReducer, message: str, lock: asyncio.Lock | None = None,
) -> tuple[dict, dict]:
    try:
        if lock is None:
            intent, result = await reducer.step(message)
        else:
            async with lock:
                intent, result = await reducer.step(message)
    except DispatchError as e:
        _raise_http(e)
    return intent.model_dump(), result.model_dump()


@router.get("/health", response_model=HealthResponse)
async def health(catalog: ModelCatalog = Depends(get_catalog)):
    """Health check, including Ollama reachability."""
    healthy = await catalog.check_health()
    return HealthResponse(
        status="ok",
        ollama="connected" if healthy else "disconnected",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
    )


@router.get("/models", response_model=ModelsResponse)
async def list_models(catalog: ModelCatalog = Depends(get_catalog)):
    """Installed Ollama models plus the recommendation table."""
    try:
        models = await catalog.list()
    except CatalogUnavailable as e:
        _raise_http(e)
    return ModelsResponse(
        models=[
            ModelInfo(
                name=m.name,
                size=m.size,
                display=catalog.format_for_display(m),
                details=m.details.model_dump(exclude_none=True),
            )
            for m in models
        ],
        recommendations=catalog.recommendations(),
    )


@router.post("/thread", response_model=StepResponse)
async def create_thread(
    body: ThreadCreateRequest,
    request: Request,
    threads: ThreadRegistry = Depends(get_threads),
):
    """Start a conversation and run its first turn."""
    slot = threads.create(lambda: build_reducer(request, model=body.model))
    reducer = slot.reducer
    next_step, result = await _step(reducer, body.message, slot.lock)
    return StepResponse(
        thread_id=reducer.state.thread_id,
        model=reducer.state.current_model,
        next_step=next_step,
        result=result,
        state=reducer.get_state(),
    )


@router.post("/thread/{thread_id}/continue", response_model=StepResponse)
async def continue_thread(
    thread_id: str,
    body: ContinueRequest,
    slot: ThreadSlot = Depends(get_slot),
):
    """Run one more turn on an existing thread."""
    next_step, result = await _step(slot.reducer, body.message, slot.lock)
    return StepResponse(
        thread_id=thread_id,
        next_step=next_step,
        result=result,
        state=slot.reducer.get_state(),
    )


@router.get("/thread/{thread_id}", response_model=ThreadStateResponse)
async def get_thread(thread_id: str, slot: ThreadSlot = Depends(get_slot)):
    return ThreadStateResponse(thread_id=thread_id, state=slot.reducer.get_state())


@router.post("/thread/{thread_id}/model", response_model=ModelChangeResponse)
async def change_model(
    thread_id: str,
    body: ModelChangeRequest,
    slot: ThreadSlot = Depends(get_slot),
):
    """Switch the thread's model through the dispatcher."""
    try:
        async with slot.lock:
            result = await slot.reducer.execute(SelectModelIntent(model_name=body.model))
    except DispatchError as e:
        _raise_http(e)
    return ModelChangeResponse(
        thread_id=thread_id,
        result=result.model_dump(),
        state=slot.reducer.get_state(),
    )


@router.post("/execute", response_model=ExecuteResponse)
async def execute(body: ExecuteRequest, request: Request):
    """Single command on a throwaway thread; nothing is registered."""
    reducer = build_reducer(request, model=body.model, thread_id=new_thread_id("temp"))
    model = reducer.state.current_model
    next_step, result = await _step(reducer, body.command)
    return ExecuteResponse(
        command=body.command,
        model=model,
        next_step=next_step,
        result=result,
    )


@router.get("/threads", response_model=ThreadListResponse)
async def list_threads(threads: ThreadRegistry = Depends(get_threads)):
    return ThreadListResponse(threads=threads.summaries())


@router.delete("/thread/{thread_id}")
async def delete_thread(thread_id: str, threads: ThreadRegistry = Depends(get_threads)):
    if not threads.delete(thread_id):
        raise HTTPException(status_code=404, detail="Thread not found")
    return {"message": "Thread deleted successfully"}

"""FastAPI dependency injection: pull singletons from app.state."""

from __future__ import annotations

from fastapi import HTTPException, Request

from ollabot.agent.reducer import AgentReducer, create_reducer
from ollabot.agent.threads import ThreadRegistry, ThreadSlot
from ollabot.core.ollama.catalog import ModelCatalog


def get_catalog(request: Request) -> ModelCatalog:
    return request.app.state.catalog


def get_threads(request: Request) -> ThreadRegistry:
    return request.app.state.threads


def get_slot(thread_id: str, request: Request) -> ThreadSlot:
    """Resolve ``{thread_id}`` path parameter to its slot, 404 otherwise."""
    slot = request.app.state.threads.get(thread_id)
    if slot is None:
        raise HTTPException(status_code=404, detail="Thread not found")
    return slot


def build_reducer(
    request: Request,
    model: str | None = None,
    thread_id: str | None = None,
) -> AgentReducer:
    """New reducer sharing the app's resolver and catalog."""
    state = request.app.state
    return create_reducer(
        state.config,
        model=model,
        thread_id=thread_id,
        resolver=state.resolver,
        catalog=state.catalog,
    )

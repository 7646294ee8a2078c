"""ThreadRegistry: in-memory map of thread id to reducer, one lock per thread."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Iterator

from loguru import logger

from ollabot.agent.reducer import AgentReducer


@dataclass
class ThreadSlot:
    reducer: AgentReducer
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class ThreadRegistry:
    """
    Keyed storage for live conversations.

    Every ``step`` / ``execute`` on a thread must run under ``slot.lock`` so
    at most one turn is in flight per state. Nothing is persisted.
    """

    def __init__(self) -> None:
        self._slots: dict[str, ThreadSlot] = {}

    def create(self, factory: Callable[[], AgentReducer]) -> ThreadSlot:
        reducer = factory()
        thread_id = reducer.state.thread_id
        if thread_id in self._slots:
            raise KeyError(f"Thread already exists: {thread_id}")
        slot = ThreadSlot(reducer)
        self._slots[thread_id] = slot
        logger.info(f"Thread created: {thread_id} (model={reducer.state.current_model})")
        return slot

    def get(self, thread_id: str) -> ThreadSlot | None:
        return self._slots.get(thread_id)

    def delete(self, thread_id: str) -> bool:
        slot = self._slots.pop(thread_id, None)
        if slot is None:
            return False
        logger.info(f"Thread deleted: {thread_id}")
        return True

    def summaries(self) -> list[dict]:
        return [
            {
                "thread_id": thread_id,
                "model": slot.reducer.state.current_model,
                "context_length": len(slot.reducer.context),
            }
            for thread_id, slot in self._slots.items()
        ]

    def __contains__(self, thread_id: object) -> bool:
        return thread_id in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._slots))

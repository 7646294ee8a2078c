"""AgentState: everything one conversation thread owns."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from ollabot.agent.context import ContextLog


def new_thread_id(prefix: str = "thread") -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


@dataclass
class AgentState:
    """
    Unified execution + business state of one thread.

    ``thread_id`` and ``service_endpoint`` are fixed at creation;
    ``current_model`` changes only through a successful model selection and
    ``context`` only through ``ContextLog.append``.
    """

    current_model: str
    service_endpoint: str
    thread_id: str = field(default_factory=new_thread_id)
    context: ContextLog = field(default_factory=ContextLog)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ("thread_id", "service_endpoint") and name in self.__dict__:
            raise AttributeError(f"{name} is immutable once the state exists")
        if name == "current_model" and not value:
            raise ValueError("current_model must be a non-empty model identifier")
        super().__setattr__(name, value)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready copy, detached from the live context log."""
        return {
            "thread_id": self.thread_id,
            "current_model": self.current_model,
            "service_endpoint": self.service_endpoint,
            "context": self.context.to_list(),
        }

"""Agent error hierarchy.

``ResolutionError`` is absorbed by the reducer (the turn degrades to a
clarification). Every ``DispatchError`` is surfaced to the caller of ``step``.
"""

from __future__ import annotations


class AgentError(Exception):
    """Base class for all agent-loop errors."""


class ResolutionError(AgentError):
    """The intent resolver could not produce a valid intent."""


class DispatchError(AgentError):
    """An intent could not be carried out."""


class CatalogUnavailable(DispatchError):
    """The model catalog (Ollama server) could not be reached."""

    def __init__(self, base_url: str, reason: str = ""):
        self.base_url = base_url
        self.reason = reason
        msg = f"Failed to connect to Ollama at {base_url}. Make sure Ollama is running."
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class UnknownModel(DispatchError):
    """Requested model is not present in the catalog."""

    def __init__(self, model_name: str, available: list[str] | None = None):
        self.model_name = model_name
        self.available = list(available or [])
        listing = ", ".join(self.available) or "none"
        super().__init__(f"Model '{model_name}' not found. Available models: {listing}")


class DivisionByZero(DispatchError):
    """Division with a zero divisor."""

    def __init__(self, a: float):
        self.a = a
        super().__init__(f"Failed to perform division: cannot divide {a} by zero")


class UnknownIntent(DispatchError):
    """Intent tag outside the closed set the dispatcher handles."""

    def __init__(self, tag: object):
        self.tag = tag
        super().__init__(f"Unknown tool: {tag}")

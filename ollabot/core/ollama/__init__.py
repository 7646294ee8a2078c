"""Ollama REST client."""

from ollabot.core.ollama.catalog import ModelCatalog, OllamaModel

__all__ = ["ModelCatalog", "OllamaModel"]

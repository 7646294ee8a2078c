"""ollabot - twelve-factor style agent loop on top of local Ollama models."""

__version__ = "0.1.0"

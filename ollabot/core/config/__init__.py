"""Configuration module."""

from ollabot.core.config.loader import load_config
from ollabot.core.config.schema import Config

__all__ = ["Config", "load_config"]

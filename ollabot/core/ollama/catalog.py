"""ModelCatalog: async client for the Ollama model inventory."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from ollabot.agent.errors import CatalogUnavailable, UnknownModel

DEFAULT_BASE_URL = "http://localhost:11434"

_GIB = 1024 * 1024 * 1024

# Static; not derived from what is installed.
RECOMMENDED_MODELS: dict[str, list[str]] = {
    "General Chat": ["llama3.1:8b", "llama3.1:70b", "mistral:7b"],
    "Code Generation": ["codellama:7b", "codellama:13b", "deepseek-coder:6.7b"],
    "Math & Logic": ["llama3.1:8b", "llama3.1:70b"],
    "Fast Response": ["llama3.1:8b", "mistral:7b", "phi3:mini"],
    "High Quality": ["llama3.1:70b", "llama3.1:405b"],
}


class OllamaModelDetails(BaseModel):
    parent_model: str | None = None
    format: str | None = None
    family: str | None = None
    families: list[str] | None = None
    parameter_size: str | None = None
    quantization_level: str | None = None


class OllamaModel(BaseModel):
    """One entry of ``GET /api/tags``."""

    name: str
    model: str = ""
    modified_at: str = ""
    size: int = 0
    digest: str = ""
    details: OllamaModelDetails = Field(default_factory=OllamaModelDetails)

    @property
    def family(self) -> str:
        return self.details.family or "unknown"

    @property
    def size_gb(self) -> float:
        return self.size / _GIB


class ModelCatalog:
    """Async client for the Ollama REST API.

    Every call opens a short-lived ``httpx.AsyncClient``; nothing is cached,
    so each ``list()`` reflects the server at that moment.

    Parameters
    ----------
    base_url : str
        Ollama server URL (e.g. "http://localhost:11434").
    timeout : float
        Per-request timeout in seconds.
    transport : httpx.AsyncBaseTransport, optional
        Custom transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )

    async def list(self) -> list[OllamaModel]:
        """Fetch all installed models.

        Raises
        ------
        CatalogUnavailable
            Connection failure, non-2xx status or an unreadable body.
        """
        try:
            async with self._client() as client:
                resp = await client.get("/api/tags")
                resp.raise_for_status()
                data = resp.json()
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            entries = data.get("models") or []
            if not isinstance(entries, list):
                raise ValueError(f"'models' is {type(entries).__name__}, expected a list")
            models = [OllamaModel.model_validate(m) for m in entries]
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.error(f"Failed to fetch models from Ollama at {self.base_url}: {e}")
            raise CatalogUnavailable(self.base_url, str(e)) from e
        logger.debug(f"Ollama catalog: {len(models)} models")
        return models

    async def names(self) -> list[str]:
        return [m.name for m in await self.list()]

    def recommendations(self) -> dict[str, list[str]]:
        """Use-case category → ordered model names (copy of the static table)."""
        return {category: list(names) for category, names in RECOMMENDED_MODELS.items()}

    async def check_health(self) -> bool:
        """True when ``/api/tags`` answers; never raises."""
        try:
            async with self._client() as client:
                resp = await client.get("/api/tags")
                resp.raise_for_status()
        except httpx.HTTPError:
            return False
        return True

    async def show(self, model_name: str) -> dict[str, Any]:
        """``POST /api/show``: modelfile, parameters and template of one model."""
        try:
            async with self._client() as client:
                resp = await client.post("/api/show", json={"name": model_name})
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Failed to get info for model {model_name}: {e}")
            raise UnknownModel(model_name) from e
        except (httpx.HTTPError, ValueError) as e:
            raise CatalogUnavailable(self.base_url, str(e)) from e

    @staticmethod
    def format_for_display(model: OllamaModel) -> str:
        return f"{model.name} ({model.family}, {model.size_gb:.1f}GB)"

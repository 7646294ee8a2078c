"""ollabot configuration schema: YAML + Pydantic + env override."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ════════════════════════════════════════════════════════════
# SUB-CONFIGS (nested BaseModel)
# ════════════════════════════════════════════════════════════


class OllamaConfig(BaseModel):
    """Ollama server the catalog and resolver talk to."""

    base_url: str = "http://localhost:11434"
    timeout: float = 10.0


class ContextConfig(BaseModel):
    """Context window bounds (entry counts, not tokens)."""

    max_entries: int = Field(default=20, ge=1)
    retain_entries: int = Field(default=15, ge=1)

    @model_validator(mode="after")
    def _check_retain(self) -> ContextConfig:
        if self.retain_entries > self.max_entries:
            raise ValueError("retain_entries must not exceed max_entries")
        return self


class AgentConfig(BaseModel):
    """Agent loop (agent.*)."""

    default_model: str = Field(default="llama3.1:8b", min_length=1)
    error_max_chars: int = Field(default=200, ge=1)
    context: ContextConfig = Field(default_factory=ContextConfig)


class ResolverConfig(BaseModel):
    """LLM call that turns a transcript into an intent."""

    provider_prefix: str = "ollama_chat"
    temperature: float = 0.0
    max_tokens: int = 512
    timeout: float = 120.0


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000


# ════════════════════════════════════════════════════════════
# ROOT CONFIG (BaseSettings, env + .env support)
# ════════════════════════════════════════════════════════════


class Config(BaseSettings):
    """
    Root configuration.

    Priority: env vars > .env > YAML (init kwargs) > defaults

    Env override examples:
        OLLABOT_OLLAMA__BASE_URL=http://gpu-box:11434
        OLLABOT_AGENT__DEFAULT_MODEL=mistral:7b
        OLLABOT_AGENT__CONTEXT__MAX_ENTRIES=40
    """

    model_config = SettingsConfigDict(
        env_prefix="OLLABOT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    # ── Computed properties ─────────────────────────────────

    @property
    def base_url(self) -> str:
        return self.ollama.base_url.rstrip("/")

    def litellm_model(self, model: str) -> str:
        """Map an Ollama model tag to a LiteLLM model string."""
        prefix = self.resolver.provider_prefix
        if not prefix or model.startswith(f"{prefix}/"):
            return model
        return f"{prefix}/{model}"

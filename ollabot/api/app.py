"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ollabot import __version__
from ollabot.agent.resolver import LLMIntentResolver
from ollabot.agent.threads import ThreadRegistry
from ollabot.api.routes import router as thread_router
from ollabot.core.config.loader import load_config
from ollabot.core.config.schema import Config
from ollabot.core.ollama.catalog import ModelCatalog


def init_state(app: FastAPI, config: Config) -> None:
    """Attach config, catalog, resolver and an empty thread registry."""
    app.state.config = config
    app.state.catalog = ModelCatalog(config.base_url, timeout=config.ollama.timeout)
    app.state.resolver = LLMIntentResolver(config)
    app.state.threads = ThreadRegistry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: Config → catalog/resolver → thread registry. Shutdown: drop threads."""
    config = load_config()
    init_state(app, config)

    healthy = await app.state.catalog.check_health()
    if not healthy:
        logger.warning(f"Ollama not reachable at {config.base_url}; requests will fail until it is")
    logger.info(
        f"ollabot API started (ollama: {config.base_url}, "
        f"default model: {config.agent.default_model})"
    )
    yield

    logger.info(f"ollabot API shutting down ({len(app.state.threads)} live threads dropped)")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="ollabot API",
        description="Twelve-factor agent loop over local Ollama models",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(thread_router)
    return app


app = create_app()

"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import Depends, FastAPI

from dialogue_generator import __version__
from dialogue_generator.config import Settings, get_settings
from dialogue_generator.logging import configure_logging
from dialogue_generator.routes import router
from dialogue_generator.websocket_handlers import websocket_endpoint


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the pooled Gemini HTTP client for the app's lifetime."""

    async with httpx.AsyncClient() as client:
        app.state.http_client = client
        yield
        del app.state.http_client


def create_app() -> FastAPI:
    """Application factory."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="AI Dialogue Generator",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version(settings: Settings = Depends(get_settings)) -> dict[str, str | bool]:
        return {
            "version": __version__,
            "environment": settings.environment,
            "model": settings.generation_model,
            "api_key_configured": settings.has_api_key,
        }

    app.include_router(router)
    app.add_api_websocket_route("/ws", websocket_endpoint)

    return app


app = create_app()

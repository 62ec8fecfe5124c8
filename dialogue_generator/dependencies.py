"""Dependency providers for the FastAPI application."""

import httpx
from fastapi import Depends
from starlette.requests import HTTPConnection

from dialogue_generator.config import Settings, get_settings
from dialogue_generator.services.dialogue_service import DialogueService
from dialogue_generator.services.gemini_client import GeminiClient


async def get_http_client(connection: HTTPConnection) -> httpx.AsyncClient:
    """Retrieve the shared AsyncClient from application state."""

    return connection.app.state.http_client  # type: ignore[return-value]


async def get_gemini_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> GeminiClient:
    """Dependency provider for GeminiClient."""

    return GeminiClient(client=client, settings=settings)


async def get_dialogue_service(
    generator: GeminiClient = Depends(get_gemini_client),
) -> DialogueService:
    """Dependency provider for DialogueService."""

    return DialogueService(generator)

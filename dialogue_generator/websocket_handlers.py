"""WebSocket handler: one connection is one dialogue session."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Annotated, Any, Coroutine

from fastapi import Depends, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from dialogue_generator.config import Settings, get_settings
from dialogue_generator.dependencies import get_dialogue_service
from dialogue_generator.models import (
    CopyFrame,
    DraftFrame,
    ErrorResponse,
    GenerateFrame,
    StateFrame,
    SyncFrame,
    client_frame_adapter,
)
from dialogue_generator.services.dialogue_service import DialogueService
from dialogue_generator.session import DialogueSession, GenerationResult

logger = logging.getLogger(__name__)

# asyncio timers may fire up to one clock tick early.
_EXPIRY_SLACK = 0.05


async def websocket_endpoint(
    websocket: WebSocket,
    dialogue_service: Annotated[DialogueService, Depends(get_dialogue_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Drive a DialogueSession from client frames and push its state back."""

    await websocket.accept()
    session = DialogueSession(dialogue_service, copy_window=settings.copy_feedback_seconds)
    background: set[asyncio.Task[Any]] = set()
    should_close = True
    logger.info(
        "WebSocket connection accepted",
        extra={"client": _client_repr(websocket)},
    )

    def spawn(coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.ensure_future(coro)
        background.add(task)
        task.add_done_callback(background.discard)

    try:
        while True:
            try:
                message = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=settings.ws_inactivity_timeout,
                )
            except asyncio.TimeoutError:
                logger.info(
                    "WebSocket inactive; closing",
                    extra={"client": _client_repr(websocket)},
                )
                await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)
                should_close = False
                break
            except WebSocketDisconnect:
                logger.info(
                    "WebSocket client disconnected",
                    extra={"client": _client_repr(websocket)},
                )
                should_close = False
                break

            try:
                frame = client_frame_adapter.validate_json(message)
            except ValidationError:
                await _send_error(
                    websocket,
                    ErrorResponse(error="invalid_payload", detail="Invalid JSON payload."),
                )
                continue

            if isinstance(frame, DraftFrame):
                session.edit(frame.text)
            elif isinstance(frame, GenerateFrame):
                if frame.text is not None:
                    session.edit(frame.text)
                resolution = session.trigger()
                if resolution is None:
                    continue
                background.add(resolution)
                resolution.add_done_callback(background.discard)
                spawn(_deliver_result(websocket, session, session.snapshot(), resolution))
            elif isinstance(frame, CopyFrame):
                if session.mark_copied():
                    await _send_state(websocket, session)
                    spawn(_expire_copy_flag(websocket, session))
            elif isinstance(frame, SyncFrame):
                await _send_state(websocket, session)
    finally:
        for task in list(background):
            task.cancel()
        if should_close and websocket.application_state == WebSocketState.CONNECTED:
            with suppress(RuntimeError, WebSocketDisconnect):
                await websocket.close()
        logger.info(
            "WebSocket connection closed",
            extra={"client": _client_repr(websocket)},
        )


async def _deliver_result(
    websocket: WebSocket,
    session: DialogueSession,
    pending: StateFrame,
    resolution: asyncio.Task[GenerationResult],
) -> None:
    """Push the pending frame, wait for the generation and push the outcome."""

    with suppress(RuntimeError, WebSocketDisconnect):
        await websocket.send_text(pending.model_dump_json())

    result = await resolution
    logger.info(
        "Dialogue generation resolved",
        extra={"client": _client_repr(websocket), "status": result.status},
    )
    with suppress(RuntimeError, WebSocketDisconnect):
        await _send_state(websocket, session)


async def _expire_copy_flag(websocket: WebSocket, session: DialogueSession) -> None:
    await asyncio.sleep(session.copy_window + _EXPIRY_SLACK)
    with suppress(RuntimeError, WebSocketDisconnect):
        await _send_state(websocket, session)


async def _send_state(websocket: WebSocket, session: DialogueSession) -> None:
    await websocket.send_text(session.snapshot().model_dump_json())


async def _send_error(websocket: WebSocket, error: ErrorResponse) -> None:
    """Send a structured error frame."""

    await websocket.send_text(error.model_dump_json())


def _client_repr(websocket: WebSocket) -> str:
    """Render the remote client for logging purposes."""

    client = websocket.client
    if client is None:
        return "unknown"
    return f"{client.host}:{client.port}"

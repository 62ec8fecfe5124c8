"""HTML pages and the one-shot generation endpoint."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from dialogue_generator.dependencies import get_dialogue_service
from dialogue_generator.exceptions import ConfigurationError, ServiceError
from dialogue_generator.input_gate import Accepted, submit
from dialogue_generator.models import DialogueRequest, DialogueResponse, ErrorResponse
from dialogue_generator.services.dialogue_service import DialogueService

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@router.get("/", response_class=HTMLResponse)
async def home(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "index.html")


@router.get("/about", response_class=HTMLResponse)
async def about(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "about.html")


@router.post(
    "/api/dialogue",
    response_model=DialogueResponse,
    responses={
        status.HTTP_204_NO_CONTENT: {"description": "Blank context; nothing generated."},
        status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def generate_dialogue(
    payload: DialogueRequest,
    dialogue_service: Annotated[DialogueService, Depends(get_dialogue_service)],
) -> Response | DialogueResponse:
    """Generate dialogue for a single context without a session."""

    decision = submit(payload.context)
    if not isinstance(decision, Accepted):
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    try:
        dialogue = await dialogue_service.generate(decision.context)
    except ServiceError as exc:
        status_code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if isinstance(exc, ConfigurationError)
            else status.HTTP_502_BAD_GATEWAY
        )
        logger.info("One-shot generation failed", extra={"code": exc.code})
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=exc.code, detail=exc.message).model_dump(),
        )

    return DialogueResponse(dialogue=dialogue)

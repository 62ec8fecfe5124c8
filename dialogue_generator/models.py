"""Pydantic models for the WebSocket and HTTP surfaces."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class DraftFrame(BaseModel):
    """Replace the session's draft."""

    type: Literal["draft"]
    text: str = Field(description="Current free-text scene description.")


class GenerateFrame(BaseModel):
    """Trigger a generation, optionally replacing the draft first."""

    type: Literal["generate"]
    text: str | None = None


class CopyFrame(BaseModel):
    """The client copied the dialogue to its clipboard."""

    type: Literal["copy"]


class SyncFrame(BaseModel):
    """Ask for the current state."""

    type: Literal["sync"]


ClientFrame = Annotated[
    Union[DraftFrame, GenerateFrame, CopyFrame, SyncFrame],
    Field(discriminator="type"),
]

client_frame_adapter: TypeAdapter[ClientFrame] = TypeAdapter(ClientFrame)


class StateFrame(BaseModel):
    """Session state pushed to WebSocket clients."""

    type: Literal["state"] = "state"
    status: Literal["idle", "pending", "success", "failure"]
    dialogue: str | None = None
    error: str | None = None
    copied: bool = False
    busy: bool = False


class DialogueRequest(BaseModel):
    """Body of a one-shot generation request."""

    context: str


class DialogueResponse(BaseModel):
    dialogue: str


class ErrorResponse(BaseModel):
    """Error payload returned to clients."""

    error: str
    detail: str | None = None

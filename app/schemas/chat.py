"""Chat schemas for the HTTP relay and the chat surface."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class RunStatus(StrEnum):
    """Run states reported by the assistants API."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatRequest(BaseModel):
    """Inbound message from the client."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = ""
    thread_id: str | None = Field(None, alias="threadId")


class ChatResponse(BaseModel):
    """Assistant reply plus the thread to resend on the next turn."""

    model_config = ConfigDict(populate_by_name=True)

    response: str
    thread_id: str = Field(..., alias="threadId")


class ErrorResponse(BaseModel):
    error: str


class SurfaceMessage(BaseModel):
    """One entry in the chat surface history."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    content: str
    role: MessageRole
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

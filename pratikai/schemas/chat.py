"""Pydantic schemas for chat operations."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from pratikai.schemas.base import BaseSchema, IDMixin, TimestampMixin


# Request schemas
class SessionCreateRequest(BaseSchema):
    """Request to start a chat session with a persona."""

    profession: str = Field(..., min_length=1, max_length=64)
    title: str | None = Field(None, max_length=255)


class SendMessageRequest(BaseSchema):
    """Request to send a chat message. Emptiness is checked by the pipeline."""

    content: str = Field(..., max_length=10000)


# Response schemas
class MessageResponse(BaseSchema, IDMixin):
    """Chat message response."""

    session_id: UUID
    role: str
    content: str
    credits_used: int
    created_at: datetime


class ChatSessionResponse(BaseSchema, IDMixin, TimestampMixin):
    """Chat session response."""

    user_id: UUID
    profession: str
    title: str


class ChatSessionWithMessages(ChatSessionResponse):
    """Chat session with message history."""

    messages: list[MessageResponse]


class SendMessageResponse(BaseSchema):
    """Both messages of an exchange and the resulting balance."""

    user_message: MessageResponse
    ai_message: MessageResponse
    credits_used: int
    remaining_credits: int

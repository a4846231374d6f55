"""Pydantic schemas for API request/response validation."""

from pratikai.schemas.auth import RegisterRequest
from pratikai.schemas.chat import (
    ChatSessionResponse,
    ChatSessionWithMessages,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
    SessionCreateRequest,
)
from pratikai.schemas.stats import AdminStatsResponse, NotComputed, UserStatsResponse
from pratikai.schemas.user import UserRead

__all__ = [
    # User
    "UserRead",
    # Auth
    "RegisterRequest",
    # Chat
    "SessionCreateRequest",
    "SendMessageRequest",
    "MessageResponse",
    "ChatSessionResponse",
    "ChatSessionWithMessages",
    "SendMessageResponse",
    # Stats
    "NotComputed",
    "UserStatsResponse",
    "AdminStatsResponse",
]

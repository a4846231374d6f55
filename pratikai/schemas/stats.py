"""Statistics schemas."""

from typing import Literal

from pydantic import Field

from pratikai.schemas.base import BaseSchema


class NotComputed(BaseSchema):
    """Marks a statistic that is not calculated yet."""

    status: Literal["not_computed"] = "not_computed"


class UserStatsResponse(BaseSchema):
    total_chats: int
    used_credits: int
    avg_session: NotComputed = Field(default_factory=NotComputed)
    satisfaction: NotComputed = Field(default_factory=NotComputed)


class AdminStatsResponse(BaseSchema):
    total_users: int
    active_sessions: int
    daily_messages: int
    api_usage: NotComputed = Field(default_factory=NotComputed)

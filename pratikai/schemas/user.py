"""User schemas."""

from datetime import datetime
from uuid import UUID

from pratikai.schemas.base import BaseSchema


class UserRead(BaseSchema):
    """Schema for reading user data."""

    id: UUID
    external_id: str
    email: str
    name: str
    profession: str | None
    credits: int
    is_admin: bool
    created_at: datetime
    updated_at: datetime

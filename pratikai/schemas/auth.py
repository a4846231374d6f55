"""Authentication schemas."""

from pydantic import EmailStr, Field

from pratikai.schemas.base import BaseSchema


class RegisterRequest(BaseSchema):
    """Registration payload; uid must match the verified bearer credential."""

    uid: str = Field(..., min_length=1, max_length=128, description="Identity provider user id")
    email: EmailStr
    name: str | None = Field(None, max_length=255)
    profession: str | None = Field(None, max_length=64)

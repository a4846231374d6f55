"""API routes package."""

from pratikai.api.routes import admin, auth, chat, users

__all__ = [
    "admin",
    "auth",
    "chat",
    "users",
]

"""Admin-only routes."""

from fastapi import APIRouter

from pratikai.api.deps import AdminUser, DbSession
from pratikai.config import get_settings
from pratikai.db import store
from pratikai.schemas.stats import AdminStatsResponse
from pratikai.schemas.user import UserRead

router = APIRouter(prefix="/api/admin", tags=["admin"])
settings = get_settings()


@router.get("/stats", response_model=AdminStatsResponse)
async def get_admin_stats(
    db: DbSession,
    admin: AdminUser,
) -> AdminStatsResponse:
    """Platform totals. activeSessions counts users active in the trailing window."""
    stats = await store.get_usage_stats(db, active_window_days=settings.active_window_days)
    return AdminStatsResponse(
        total_users=stats.total_users,
        active_sessions=stats.active_users,
        daily_messages=stats.total_messages,
    )


@router.get("/users", response_model=list[UserRead])
async def list_users(
    db: DbSession,
    admin: AdminUser,
) -> list[UserRead]:
    """All users, newest first."""
    users = await store.list_users(db)
    return [UserRead.model_validate(u) for u in users]

"""Per-user statistics routes."""

from fastapi import APIRouter

from pratikai.api.deps import CurrentUser, DbSession
from pratikai.db import store
from pratikai.schemas.stats import UserStatsResponse

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/stats", response_model=UserStatsResponse)
async def get_user_stats(
    db: DbSession,
    user: CurrentUser,
) -> UserStatsResponse:
    """
    Chat count and credits spent by the caller.

    Average session length and satisfaction are not tracked yet and are
    reported as not computed.
    """
    stats = await store.get_user_chat_stats(db, user.id)
    return UserStatsResponse(total_chats=stats.total_chats, used_credits=stats.used_credits)

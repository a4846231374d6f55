"""
Session/message store.

Async query functions over an AsyncSession. Every write commits on its own;
callers order their writes so that a failure between two of them leaves the
data consistent (a user message may exist without a reply, never the reverse).
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy import distinct, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pratikai.db.models import (
    DEFAULT_SESSION_TITLE,
    ChatSession,
    Message,
    MessageRole,
    User,
    utc_now,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageStats:
    total_users: int
    total_messages: int
    active_users: int


@dataclass(frozen=True)
class UserChatStats:
    total_chats: int
    used_credits: int


# =============================================================================
# USERS
# =============================================================================


async def get_user_by_external_id(db: AsyncSession, external_id: str) -> User | None:
    result = await db.execute(select(User).where(User.external_id == external_id))
    return result.scalar_one_or_none()


async def upsert_user(
    db: AsyncSession,
    *,
    external_id: str,
    email: str,
    name: str,
    profession: str | None = None,
    credits: int = 1000,
    is_admin: bool = False,
) -> User:
    """
    Return the user for external_id, creating it if absent.

    Existing users are returned unchanged, which makes registration idempotent.
    """
    existing = await get_user_by_external_id(db, external_id)
    if existing is not None:
        return existing

    user = User(
        external_id=external_id,
        email=email,
        name=name,
        profession=profession,
        credits=credits,
        is_admin=is_admin,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        await db.rollback()
        existing = await get_user_by_external_id(db, external_id)
        if existing is None:
            raise
        return existing

    logger.info("Registered user %s", user.id)
    return user


async def list_users(db: AsyncSession) -> list[User]:
    """All users, newest first."""
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())


async def deduct_credits(
    db: AsyncSession,
    user_id: UUID,
    amount: int,
    *,
    allow_overdraft: bool = False,
) -> int | None:
    """
    Atomically subtract amount from a user's balance.

    Runs a single UPDATE ... SET credits = credits - amount. Unless
    allow_overdraft is set, the update only applies WHERE credits >= amount.

    Returns:
        The new balance, or None if the update did not apply
    """
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(credits=User.credits - amount, updated_at=utc_now())
        .returning(User.credits)
    )
    if not allow_overdraft:
        stmt = stmt.where(User.credits >= amount)

    result = await db.execute(stmt)
    balance = result.scalar_one_or_none()
    await db.commit()
    return balance


# =============================================================================
# CHAT SESSIONS
# =============================================================================


async def create_chat_session(
    db: AsyncSession,
    *,
    user_id: UUID,
    profession: str,
    title: str | None = None,
) -> ChatSession:
    session = ChatSession(
        user_id=user_id,
        profession=profession,
        title=title or DEFAULT_SESSION_TITLE,
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)
    return session


async def get_chat_session(db: AsyncSession, session_id: UUID) -> ChatSession | None:
    result = await db.execute(select(ChatSession).where(ChatSession.id == session_id))
    return result.scalar_one_or_none()


async def get_chat_session_with_messages(db: AsyncSession, session_id: UUID) -> ChatSession | None:
    """Session with its messages loaded in creation order."""
    result = await db.execute(
        select(ChatSession)
        .options(selectinload(ChatSession.messages))
        .where(ChatSession.id == session_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_user_chat_sessions(db: AsyncSession, user_id: UUID) -> list[ChatSession]:
    """User's sessions, most recently updated first."""
    result = await db.execute(
        select(ChatSession)
        .where(ChatSession.user_id == user_id)
        .order_by(ChatSession.updated_at.desc())
    )
    return list(result.scalars().all())


async def update_chat_session_title(
    db: AsyncSession,
    session_id: UUID,
    title: str,
) -> bool:
    """
    Set the derived title unless one was already derived.

    Returns True if this call wrote the title.
    """
    result = await db.execute(
        update(ChatSession)
        .where(ChatSession.id == session_id, ChatSession.title_generated.is_(False))
        .values(title=title, title_generated=True, updated_at=utc_now())
        .returning(ChatSession.id)
    )
    written = result.scalar_one_or_none() is not None
    await db.commit()
    return written


# =============================================================================
# MESSAGES
# =============================================================================


async def create_message(
    db: AsyncSession,
    *,
    session_id: UUID,
    role: MessageRole,
    content: str,
    credits_used: int = 0,
) -> Message:
    message = Message(
        session_id=session_id,
        role=role.value,
        content=content,
        credits_used=credits_used,
    )
    db.add(message)
    await db.commit()
    return message


async def get_session_messages(db: AsyncSession, session_id: UUID) -> list[Message]:
    """Messages of a session in creation order."""
    result = await db.execute(
        select(Message)
        .where(Message.session_id == session_id)
        .order_by(Message.created_at.asc())
    )
    return list(result.scalars().all())


# =============================================================================
# STATS
# =============================================================================


async def get_usage_stats(db: AsyncSession, *, active_window_days: int = 7) -> UsageStats:
    """Totals across all users; active users have a session updated in the window."""
    cutoff = utc_now() - timedelta(days=active_window_days)

    total_users = await db.scalar(select(func.count()).select_from(User))
    total_messages = await db.scalar(select(func.count()).select_from(Message))
    active_users = await db.scalar(
        select(func.count(distinct(ChatSession.user_id))).where(ChatSession.updated_at > cutoff)
    )

    return UsageStats(
        total_users=total_users or 0,
        total_messages=total_messages or 0,
        active_users=active_users or 0,
    )


async def get_user_chat_stats(db: AsyncSession, user_id: UUID) -> UserChatStats:
    total_chats = await db.scalar(
        select(func.count()).select_from(ChatSession).where(ChatSession.user_id == user_id)
    )
    used_credits = await db.scalar(
        select(func.coalesce(func.sum(Message.credits_used), 0))
        .join(ChatSession, Message.session_id == ChatSession.id)
        .where(ChatSession.user_id == user_id)
    )
    return UserChatStats(total_chats=total_chats or 0, used_credits=int(used_credits or 0))

"""
Credit-metered conversation pipeline.

send_message runs one exchange end to end:

    resolve user -> check session ownership -> check credit floor
    -> validate content -> persist user message -> generate reply
    -> persist reply -> deduct credits -> derive title (first exchange only)

The first failing check aborts the request and nothing after it runs. The
user's message is committed before the provider is called, so a provider
outage never loses input; credits are only touched once a reply exists.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from pratikai.db import store
from pratikai.db.models import DEFAULT_SESSION_TITLE, Message, MessageRole
from pratikai.errors import (
    AuthenticationRequired,
    InsufficientCredits,
    Internal,
    InvalidInput,
    NotFound,
)
from pratikai.services.generator import ConversationGenerator, HistoryTurn
from pratikai.services.pricing import MINIMUM_CHARGE

logger = logging.getLogger(__name__)

TITLE_WORD_LIMIT = 6
TITLE_MAX_LENGTH = 50


@dataclass(frozen=True)
class Exchange:
    """Result of a successful send_message call."""

    user_message: Message
    ai_message: Message
    credits_used: int
    remaining_credits: int


def derive_session_title(first_message: str) -> str:
    """Title from the first six words, cut to 50 characters with an ellipsis."""
    title = " ".join(first_message.split(" ")[:TITLE_WORD_LIMIT])
    if len(title) > TITLE_MAX_LENGTH:
        title = title[: TITLE_MAX_LENGTH - 3] + "..."
    return title or DEFAULT_SESSION_TITLE


class ConversationService:
    """Runs exchanges against a conversation generator."""

    def __init__(self, generator: ConversationGenerator):
        self.generator = generator

    async def send_message(
        self,
        db: AsyncSession,
        *,
        external_id: str,
        session_id: UUID,
        content: str,
    ) -> Exchange:
        """
        Append a user message to a session and generate the assistant's reply.

        Raises:
            AuthenticationRequired: No user is registered for external_id
            NotFound: The session does not exist or belongs to another user
            InsufficientCredits: Balance is below the minimum charge
            InvalidInput: Content is empty
            GenerationUnavailable: The provider failed; the user message stays
                persisted, no reply is stored and nothing is charged
        """
        user = await store.get_user_by_external_id(db, external_id)
        if user is None:
            raise AuthenticationRequired("User not registered")

        session = await store.get_chat_session(db, session_id)
        if session is None or session.user_id != user.id:
            raise NotFound("Session not found")

        # Cost is unknown until generation completes, so only the floor is checked
        if user.credits < MINIMUM_CHARGE:
            raise InsufficientCredits()

        text = (content or "").strip()
        if not text:
            raise InvalidInput("Message content is required")

        user_message = await store.create_message(
            db,
            session_id=session.id,
            role=MessageRole.USER,
            content=text,
            credits_used=0,
        )

        messages = await store.get_session_messages(db, session.id)
        is_first_exchange = len(messages) == 1
        history = [HistoryTurn(role=m.role, content=m.content) for m in messages]

        reply = await self.generator.generate_reply(history, session.profession)

        ai_message = await store.create_message(
            db,
            session_id=session.id,
            role=MessageRole.ASSISTANT,
            content=reply.text,
            credits_used=reply.credits_used,
        )

        remaining = await store.deduct_credits(db, user.id, reply.credits_used)
        if remaining is None:
            logger.warning(
                "Reply cost %d exceeds balance of user %s; overdrawing",
                reply.credits_used,
                user.id,
            )
            remaining = await store.deduct_credits(
                db, user.id, reply.credits_used, allow_overdraft=True
            )
            if remaining is None:
                raise Internal("Failed to update credits")

        if is_first_exchange:
            await store.update_chat_session_title(db, session.id, derive_session_title(text))

        logger.info(
            "Exchange in session %s charged %d credits (remaining %s)",
            session.id,
            reply.credits_used,
            remaining,
        )

        return Exchange(
            user_message=user_message,
            ai_message=ai_message,
            credits_used=reply.credits_used,
            remaining_credits=remaining,
        )

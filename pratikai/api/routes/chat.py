"""API routes for persona chat sessions."""

from uuid import UUID

from fastapi import APIRouter

from pratikai.api.deps import Conversations, CurrentIdentity, CurrentUser, DbSession
from pratikai.db import store
from pratikai.errors import NotFound
from pratikai.schemas.chat import (
    ChatSessionResponse,
    ChatSessionWithMessages,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
    SessionCreateRequest,
)
from pratikai.services.personas import normalize_persona_key

router = APIRouter(prefix="/api/chat", tags=["chat"])


# =============================================================================
# SESSION MANAGEMENT
# =============================================================================


@router.get("/sessions", response_model=list[ChatSessionResponse])
async def list_sessions(
    db: DbSession,
    user: CurrentUser,
) -> list[ChatSessionResponse]:
    """List the caller's sessions, most recently updated first."""
    sessions = await store.list_user_chat_sessions(db, user.id)
    return [ChatSessionResponse.model_validate(s) for s in sessions]


@router.post("/sessions", response_model=ChatSessionResponse)
async def create_session(
    request: SessionCreateRequest,
    db: DbSession,
    user: CurrentUser,
) -> ChatSessionResponse:
    """
    Start a session with a persona.

    Unknown professions are accepted; they chat with the default persona.
    """
    session = await store.create_chat_session(
        db,
        user_id=user.id,
        profession=normalize_persona_key(request.profession),
        title=request.title,
    )
    return ChatSessionResponse.model_validate(session)


@router.get("/sessions/{session_id}", response_model=ChatSessionWithMessages)
async def get_session(
    session_id: UUID,
    db: DbSession,
    user: CurrentUser,
) -> ChatSessionWithMessages:
    """Get a session with its full message history."""
    session = await store.get_chat_session_with_messages(db, session_id)
    if session is None or session.user_id != user.id:
        raise NotFound("Session not found")
    return ChatSessionWithMessages.model_validate(session)


# =============================================================================
# MESSAGES
# =============================================================================


@router.post("/sessions/{session_id}/messages", response_model=SendMessageResponse)
async def send_message(
    session_id: UUID,
    request: SendMessageRequest,
    db: DbSession,
    identity: CurrentIdentity,
    conversations: Conversations,
) -> SendMessageResponse:
    """
    Send a message and get the assistant's reply.

    Charges the reply's cost to the caller. If the AI provider fails the
    request returns 503, the message is kept and nothing is charged.
    """
    exchange = await conversations.send_message(
        db,
        external_id=identity.uid,
        session_id=session_id,
        content=request.content,
    )
    return SendMessageResponse(
        user_message=MessageResponse.model_validate(exchange.user_message),
        ai_message=MessageResponse.model_validate(exchange.ai_message),
        credits_used=exchange.credits_used,
        remaining_credits=exchange.remaining_credits,
    )

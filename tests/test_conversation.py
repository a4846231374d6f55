"""Tests for the credit-metered conversation pipeline."""

from uuid import uuid4

import httpx
import pytest
from anthropic import APIConnectionError

from pratikai.db import store
from pratikai.db.models import DEFAULT_SESSION_TITLE, MessageRole
from pratikai.errors import (
    AuthenticationRequired,
    GenerationUnavailable,
    InsufficientCredits,
    InvalidInput,
    NotFound,
)
from pratikai.services.conversation import ConversationService, derive_session_title
from pratikai.services.personas import Persona, system_instruction


@pytest.fixture
def service(generator) -> ConversationService:
    return ConversationService(generator)


async def _user(db, external_id="u1", credits=1000):
    return await store.upsert_user(
        db,
        external_id=external_id,
        email=f"{external_id}@example.com",
        name=external_id,
        credits=credits,
    )


class TestDeriveSessionTitle:
    def test_short_message_is_kept(self):
        assert derive_session_title("Başım ağrıyor, ne yapmalıyım?") == "Başım ağrıyor, ne yapmalıyım?"

    def test_keeps_first_six_words(self):
        assert derive_session_title("bir iki üç dört beş altı yedi sekiz") == "bir iki üç dört beş altı"

    def test_long_title_is_truncated_with_ellipsis(self):
        words = ["uzunkelimeuzun"] * 6
        title = derive_session_title(" ".join(words))

        assert len(title) == 50
        assert title.endswith("...")
        assert title[:47] == " ".join(words)[:47]

    def test_exactly_fifty_characters_is_not_truncated(self):
        message = "a" * 50
        assert derive_session_title(message) == message

    def test_empty_falls_back_to_placeholder(self):
        assert derive_session_title("") == DEFAULT_SESSION_TITLE


async def test_first_exchange(db, service, provider):
    user = await _user(db)
    session = await store.create_chat_session(db, user_id=user.id, profession="doktor")

    exchange = await service.send_message(
        db, external_id="u1", session_id=session.id, content="Başım ağrıyor, ne yapmalıyım?"
    )

    assert exchange.user_message.role == MessageRole.USER.value
    assert exchange.user_message.credits_used == 0
    assert exchange.ai_message.role == MessageRole.ASSISTANT.value
    assert exchange.ai_message.session_id == session.id
    assert exchange.ai_message.content == provider.messages.reply
    assert exchange.credits_used >= 3
    assert exchange.ai_message.credits_used == exchange.credits_used
    assert exchange.remaining_credits == 1000 - exchange.credits_used

    await db.refresh(user)
    assert user.credits == exchange.remaining_credits

    loaded = await store.get_chat_session_with_messages(db, session.id)
    assert loaded.title == "Başım ağrıyor, ne yapmalıyım?"
    assert [m.id for m in loaded.messages] == [exchange.user_message.id, exchange.ai_message.id]

    call = provider.messages.calls[-1]
    assert call["system"] == system_instruction(Persona.DOCTOR)
    assert call["messages"] == [{"role": "user", "content": "Başım ağrıyor, ne yapmalıyım?"}]


async def test_content_is_trimmed(db, service):
    user = await _user(db)
    session = await store.create_chat_session(db, user_id=user.id, profession="muhendis")

    exchange = await service.send_message(db, external_id="u1", session_id=session.id, content="  Merhaba  ")

    assert exchange.user_message.content == "Merhaba"


async def test_later_exchanges_send_history_and_keep_title(db, service, provider):
    user = await _user(db)
    session = await store.create_chat_session(db, user_id=user.id, profession="avukat")

    first = await service.send_message(db, external_id="u1", session_id=session.id, content="Kira sözleşmesi")
    provider.messages.reply = "İkinci yanıt"
    second = await service.send_message(db, external_id="u1", session_id=session.id, content="Depozito iadesi")

    loaded = await store.get_chat_session_with_messages(db, session.id)
    assert loaded.title == "Kira sözleşmesi"
    assert [m.content for m in loaded.messages] == [
        "Kira sözleşmesi",
        first.ai_message.content,
        "Depozito iadesi",
        "İkinci yanıt",
    ]
    assert [m["role"] for m in provider.messages.calls[-1]["messages"]] == ["user", "assistant", "user"]
    assert second.remaining_credits == 1000 - first.credits_used - second.credits_used


async def test_unregistered_user_is_rejected(db, service):
    user = await _user(db)
    session = await store.create_chat_session(db, user_id=user.id, profession="doktor")

    with pytest.raises(AuthenticationRequired):
        await service.send_message(db, external_id="ghost", session_id=session.id, content="Merhaba")


async def test_missing_and_foreign_sessions_look_the_same(db, service, provider):
    owner = await _user(db, external_id="owner")
    await _user(db, external_id="intruder")
    session = await store.create_chat_session(db, user_id=owner.id, profession="doktor")

    with pytest.raises(NotFound) as foreign:
        await service.send_message(db, external_id="intruder", session_id=session.id, content="Merhaba")
    with pytest.raises(NotFound) as missing:
        await service.send_message(db, external_id="intruder", session_id=uuid4(), content="Merhaba")

    assert foreign.value.message == missing.value.message
    assert await store.get_session_messages(db, session.id) == []
    assert provider.messages.calls == []


async def test_insufficient_credits(db, service, provider):
    user = await _user(db, credits=2)
    session = await store.create_chat_session(db, user_id=user.id, profession="doktor")

    with pytest.raises(InsufficientCredits):
        await service.send_message(db, external_id="u1", session_id=session.id, content="Merhaba")

    await db.refresh(user)
    assert user.credits == 2
    assert await store.get_session_messages(db, session.id) == []
    assert provider.messages.calls == []


async def test_credit_check_comes_before_content_check(db, service):
    user = await _user(db, credits=0)
    session = await store.create_chat_session(db, user_id=user.id, profession="doktor")

    with pytest.raises(InsufficientCredits):
        await service.send_message(db, external_id="u1", session_id=session.id, content="   ")


@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
async def test_empty_content_is_rejected(db, service, content):
    user = await _user(db)
    session = await store.create_chat_session(db, user_id=user.id, profession="doktor")

    with pytest.raises(InvalidInput):
        await service.send_message(db, external_id="u1", session_id=session.id, content=content)

    assert await store.get_session_messages(db, session.id) == []


async def test_generation_failure_keeps_user_message_and_charges_nothing(db, service, provider):
    user = await _user(db)
    session = await store.create_chat_session(db, user_id=user.id, profession="doktor")
    provider.messages.error = APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )

    with pytest.raises(GenerationUnavailable):
        await service.send_message(db, external_id="u1", session_id=session.id, content="Merhaba")

    await db.refresh(user)
    assert user.credits == 1000
    messages = await store.get_session_messages(db, session.id)
    assert [(m.role, m.content) for m in messages] == [("user", "Merhaba")]
    loaded = await store.get_chat_session(db, session.id)
    assert loaded.title == DEFAULT_SESSION_TITLE


async def test_retry_after_failure_duplicates_message_and_keeps_placeholder_title(db, service, provider):
    user = await _user(db)
    session = await store.create_chat_session(db, user_id=user.id, profession="doktor")
    provider.messages.error = APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )
    with pytest.raises(GenerationUnavailable):
        await service.send_message(db, external_id="u1", session_id=session.id, content="Merhaba")

    provider.messages.error = None
    await service.send_message(db, external_id="u1", session_id=session.id, content="Merhaba")

    messages = await store.get_session_messages(db, session.id)
    assert [m.role for m in messages] == ["user", "user", "assistant"]
    # Not the first exchange any more, so the placeholder title stays
    loaded = await store.get_chat_session(db, session.id)
    await db.refresh(loaded)
    assert loaded.title == DEFAULT_SESSION_TITLE


async def test_long_reply_can_overdraw_balance(db, service, provider):
    user = await _user(db, credits=5)
    session = await store.create_chat_session(db, user_id=user.id, profession="muhendis")
    provider.messages.reply = "x" * 500

    exchange = await service.send_message(db, external_id="u1", session_id=session.id, content="Anlat")

    assert exchange.credits_used == 10
    assert exchange.remaining_credits == -5
    await db.refresh(user)
    assert user.credits == -5

"""Pytest configuration and fixtures."""

import os

# Settings are read once at import time, so the environment must be ready first
os.environ["IDENTITY_PROVIDER"] = "local"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["ANTHROPIC_API_KEY"] = "test-anthropic-key"
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_EXTERNAL_IDS"] = '["admin-1"]'

from collections.abc import AsyncGenerator
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pratikai.api.deps import get_generator, get_identity_resolver
from pratikai.db.base import Base
from pratikai.db.session import get_db
from pratikai.main import app
from pratikai.services.generator import ConversationGenerator
from pratikai.services.identity import LocalIdentityResolver

TEST_SECRET = "test-secret"


class FakeMessages:
    """Stands in for AsyncAnthropic().messages."""

    def __init__(self):
        self.reply = "Bol su için ve dinlenin. Ağrı devam ederse bir doktora başvurun."
        self.blocks = None
        self.error: Exception | None = None
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        blocks = self.blocks
        if blocks is None:
            blocks = [SimpleNamespace(type="text", text=self.reply)]
        return SimpleNamespace(content=blocks)


class FakeAnthropic:
    def __init__(self):
        self.messages = FakeMessages()

    async def close(self) -> None:
        pass


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def provider() -> FakeAnthropic:
    return FakeAnthropic()


@pytest.fixture
def generator(provider) -> ConversationGenerator:
    return ConversationGenerator(provider, model="test-model", max_tokens=2048, temperature=0.7)


@pytest.fixture
def resolver() -> LocalIdentityResolver:
    return LocalIdentityResolver(TEST_SECRET)


@pytest.fixture
def auth_headers(resolver):
    """Build an Authorization header for a uid."""

    def _headers(uid: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {resolver.issue_token(uid)}"}

    return _headers


@pytest.fixture
async def client(session_factory, generator, resolver) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generator] = lambda: generator
    app.dependency_overrides[get_identity_resolver] = lambda: resolver

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()

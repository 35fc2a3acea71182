"""Shared fixtures: an in-memory registry, a real token issuer, and a recording room service."""
from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.session import build_sessionmaker
from app.main import create_app
from app.models.base import Base
from app.services.registry import MeetingRegistry
from app.services.rtc import CredentialIssuer

API_KEY = "APItestkey"
API_SECRET = "test-secret-that-is-long-enough-for-hs256-signing"


class RecordingRooms:
    """Room service stub that remembers deletions and can be told to fail."""

    def __init__(self, error: Exception | None = None) -> None:
        self.deleted: list[str] = []
        self.error = error

    async def delete_room(self, room: str) -> None:
        self.deleted.append(room)
        if self.error is not None:
            raise self.error


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        livekit_url="wss://livekit.test",
        livekit_api_key=API_KEY,
        livekit_api_secret=API_SECRET,
        database_url="sqlite+aiosqlite://",
    )


@pytest_asyncio.fixture
async def registry() -> AsyncIterator[MeetingRegistry]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield MeetingRegistry(build_sessionmaker(engine))
    await engine.dispose()


@pytest.fixture
def issuer() -> CredentialIssuer:
    return CredentialIssuer(API_KEY, API_SECRET)


@pytest.fixture
def rooms() -> RecordingRooms:
    return RecordingRooms()


@pytest_asyncio.fixture
async def client(settings, registry, issuer, rooms) -> AsyncIterator[AsyncClient]:
    app = create_app(settings, registry=registry, issuer=issuer, rooms=rooms)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http


@pytest.fixture
def verify_token():
    """Return a callable decoding a token back into its LiveKit claims."""

    from livekit import api

    verifier = api.TokenVerifier(API_KEY, API_SECRET)
    return verifier.verify

"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Callable, Generator
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer
from uuid6 import uuid7

# Must be set before any app import triggers Settings validation
os.environ.setdefault("NOTE_STORE_BACKEND", "memory")

from db.memory_store import InMemoryNoteStore  # noqa: E402
from models.base import Base  # noqa: E402
from services.note_history import VersionedNote  # noqa: E402
from services.note_service import NoteService  # noqa: E402

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)

SESSION_A = "11111111-1111-4111-8111-111111111111"
SESSION_B = "22222222-2222-4222-8222-222222222222"

# Constant for non-existent entity ID
FAKE_UUID = str(uuid4())


@pytest.fixture
def make_note() -> Callable[..., VersionedNote]:
    """Factory for VersionedNote instances with sensible defaults."""
    def _make(**overrides: Any) -> VersionedNote:
        fields: dict[str, Any] = {
            "id": uuid7(),
            "owner_session": SESSION_A,
            "title": "V1",
            "content": "C1",
            "created_at": T0,
            "edited_at": T0,
        }
        fields.update(overrides)
        return VersionedNote(**fields)

    return _make


@pytest.fixture
def memory_store() -> InMemoryNoteStore:
    """Fresh in-memory store per test."""
    return InMemoryNoteStore()


@pytest.fixture
def note_service(memory_store: InMemoryNoteStore) -> NoteService:
    """NoteService backed by the in-memory store."""
    return NoteService(memory_store)


def _make_client(session_id: str | None) -> AsyncClient:
    from api.main import app

    cookies = {"session_id": session_id} if session_id else None
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies=cookies,
    )


@pytest.fixture
async def client(memory_store: InMemoryNoteStore) -> AsyncGenerator[AsyncClient]:
    """Create a test client for SESSION_A with the note store overridden."""
    # Clear the settings cache so it picks up NOTE_STORE_BACKEND from environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.dependencies import get_note_store
    from api.main import app

    async def override_get_note_store() -> AsyncGenerator[InMemoryNoteStore]:
        yield memory_store

    app.dependency_overrides[get_note_store] = override_get_note_store

    async with _make_client(SESSION_A) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def other_client(client: AsyncClient) -> AsyncGenerator[AsyncClient]:
    """A client for a second session sharing the same app and store."""
    async with _make_client(SESSION_B) as test_client:
        yield test_client


@pytest.fixture
async def anonymous_client(client: AsyncClient) -> AsyncGenerator[AsyncClient]:
    """A client that sends no session cookie."""
    async with _make_client(None) as test_client:
        yield test_client


# =============================================================================
# PostgreSQL fixtures (SqlNoteStore tests)
# =============================================================================


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer]:
    """Start a PostgreSQL container for the test session, or skip without Docker."""
    container = PostgresContainer("postgres:16", driver="asyncpg")
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"PostgreSQL container unavailable: {e}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def database_url(postgres_container: PostgresContainer) -> str:
    """Get the database URL from the container."""
    return postgres_container.get_connection_url()


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine for testing."""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_connection(async_engine: AsyncEngine) -> AsyncGenerator[AsyncConnection]:
    """
    Create a connection with a transaction that will be rolled back after the test.

    Each test runs in its own transaction, so tests don't affect each other.
    """
    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        try:
            yield connection
        finally:
            await transaction.rollback()


@pytest.fixture
async def db_session(db_connection: AsyncConnection) -> AsyncGenerator[AsyncSession]:
    """Create an async session bound to the test transaction using savepoints."""
    session_factory = async_sessionmaker(
        bind=db_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    async with session_factory() as session:
        yield session

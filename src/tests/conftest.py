"""Shared pytest fixtures for test suite."""

import os
from collections.abc import AsyncGenerator, Generator

# Set test environment variables BEFORE any codity imports so that settings,
# the module-level engine and tracing are initialized for tests.
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["OTEL_ENABLED"] = "false"  # Disable OpenTelemetry to prevent background threads
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from codity.core.config import Settings
from codity.core.database import get_db, init_models
from codity.main import app
from codity.services.users import UserService


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Get settings configured for testing.

    Returns:
        Settings: Test environment settings
    """
    return Settings(
        environment="testing",
        log_level="WARNING",
    )


# ===== Database Fixtures =====


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables for one test.

    StaticPool keeps a single connection so that every session opened on
    this engine sees the same in-memory database.

    Yields:
        AsyncEngine: Test database engine
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    await init_models(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for seeding and assertions.

    Yields:
        AsyncSession: Session bound to the per-test database
    """
    async with session_maker() as session:
        yield session


@pytest.fixture
def sql_statements(test_engine: AsyncEngine) -> Generator[list[str], None, None]:
    """Record every SQL statement sent to the per-test database.

    Example:
        sql_statements.clear()
        await repository.get_paged(1, 10)
        assert len(sql_statements) == 2
    """
    statements: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany) -> None:
        statements.append(statement)

    event.listen(test_engine.sync_engine, "before_cursor_execute", record)
    yield statements
    event.remove(test_engine.sync_engine, "before_cursor_execute", record)


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    """UserService wired to the per-test database."""
    return UserService.from_session(db_session)


# ===== API Client Fixtures =====


@pytest_asyncio.fixture
async def async_client(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client whose requests use the per-test database.

    Yields:
        AsyncClient: HTTP client for testing FastAPI endpoints

    Example:
        async def test_endpoint(async_client: AsyncClient):
            response = await async_client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test"
        ) as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_db, None)


# ===== Utility Fixtures =====


@pytest.fixture
def anyio_backend() -> str:
    """Specify asyncio as the backend for anyio tests.

    Returns:
        str: Backend name
    """
    return "asyncio"

"""Database connection management with async SQLAlchemy."""

from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from codity.core.config import settings
from codity.core.logging import get_logger
from codity.models import Base

logger = get_logger(__name__)


class DBErrorMessage:
    """Standardized database error messages."""
    CREATE_ENGINE_NO_URL = "Database URL is not configured"
    CREATE_ENGINE_MIN_DB_POOL_SIZE = "DATABASE_POOL_SIZE must be at least 1"
    CREATE_ENGINE_NEGATIVE_MAX_OVERFLOW = "DATABASE_MAX_OVERFLOW must be non-negative"
    CREATE_ENGINE_FAILED = "Failed to create database engine"

    GET_DB_SESSION_FAILED = "Failed to create database session"
    CLOSE_DATABASE_FAILED = "Failed to close database connections"


def create_engine() -> AsyncEngine:
    """Create AsyncEngine from settings.

    Server databases (PostgreSQL via asyncpg) get a sized connection pool with
    pre-ping and hourly recycling. SQLite uses SQLAlchemy's default pool for
    the URL and only disables the same-thread check.

    Raises:
        ValueError: If database URL is missing or pool settings are invalid
    """
    try:
        if not settings.database_url:
            raise ValueError(DBErrorMessage.CREATE_ENGINE_NO_URL)

        engine_kwargs: dict[str, Any] = {"echo": False}

        if settings.is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            if settings.database_pool_size < 1:
                raise ValueError(DBErrorMessage.CREATE_ENGINE_MIN_DB_POOL_SIZE)

            if settings.database_max_overflow < 0:
                raise ValueError(DBErrorMessage.CREATE_ENGINE_NEGATIVE_MAX_OVERFLOW)

            engine_kwargs.update(
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )

        logger.info(
            "Creating async database engine",
            url=settings.database_url.split("@")[1] if "@" in settings.database_url else "***",
            system=settings.database_system,
        )

        return create_async_engine(settings.database_url, **engine_kwargs)
    except ValueError:
        raise
    except Exception as e:
        logger.error(f"Failed to create database engine, due to configuration error: {e}")
        raise ValueError(DBErrorMessage.CREATE_ENGINE_FAILED) from e


engine: AsyncEngine = create_engine()

async_session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Yields:
        AsyncSession: Database session handed to repositories for one request

    Raises:
        RuntimeError: If the session fails at the storage layer
    """
    session = async_session_maker()
    try:
        async with session:
            yield session
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database session error occurred: {e}")
        raise RuntimeError(DBErrorMessage.GET_DB_SESSION_FAILED) from e


async def init_models(target: AsyncEngine | None = None) -> None:
    """Create any missing tables, unique indexes and check constraints."""
    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_database_connection() -> bool:
    """Check if database connection is available.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.debug("Database connection check passed")
        return True
    except Exception as e:
        logger.error(f"Database connection check failed with error: {e}")
        return False


async def close_database() -> None:
    """Dispose of all pooled connections on shutdown.

    Raises:
        RuntimeError: If graceful shutdown fails
    """
    try:
        logger.info("Closing database connections")
        await engine.dispose()
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")
        raise RuntimeError(DBErrorMessage.CLOSE_DATABASE_FAILED) from e

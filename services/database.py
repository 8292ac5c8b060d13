"""Database connection management for transcription history.

Async SQLAlchemy engine with SQLModel over asyncpg, built lazily from
DATABASE_URL. History endpoints are unavailable when DATABASE_URL is unset.
"""
import os
import ssl
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)

# Global engine instance (initialized lazily)
_engine: AsyncEngine | None = None
_async_session_maker: sessionmaker | None = None

# Query parameters that libpq understands but asyncpg rejects
_INCOMPATIBLE_PARAMS = ['sslmode', 'channel_binding', 'options']


def is_database_configured() -> bool:
    """Return True when DATABASE_URL is set."""
    return bool(os.getenv("DATABASE_URL"))


def get_database_url() -> tuple[str, dict]:
    """Get DATABASE_URL rewritten for the asyncpg driver.

    Returns:
        Tuple of (database URL with asyncpg driver, connect_args dict).

    Raises:
        ValueError: If DATABASE_URL is not set.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable is not set")

    parsed = urlparse(database_url)
    query_params = parse_qs(parsed.query)

    connect_args = {}
    sslmode = query_params.get('sslmode', [''])[0]
    ssl_required = sslmode in ('require', 'verify-ca', 'verify-full')

    filtered_params = {k: v for k, v in query_params.items() if k not in _INCOMPATIBLE_PARAMS}
    new_query = urlencode(filtered_params, doseq=True) if filtered_params else ''

    clean_url = urlunparse((
        'postgresql+asyncpg',
        parsed.netloc,
        parsed.path,
        parsed.params,
        new_query,
        parsed.fragment
    ))

    if ssl_required:
        ssl_context = ssl.create_default_context()
        if sslmode == 'require':
            # libpq 'require' encrypts without verifying the server certificate
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        connect_args['ssl'] = ssl_context

    return clean_url, connect_args


def get_engine() -> AsyncEngine:
    """Get or create the async database engine."""
    global _engine

    if _engine is None:
        database_url, connect_args = get_database_url()

        _engine = create_async_engine(
            database_url,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            pool_recycle=300,
            echo=False,
            connect_args=connect_args,
        )

        logger.info("Database engine created successfully")

    return _engine


def get_session_maker() -> sessionmaker:
    """Get or create the async session maker."""
    global _async_session_maker

    if _async_session_maker is None:
        _async_session_maker = sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False
        )

    return _async_session_maker


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Async context manager for database sessions.

    Usage:
        async with get_async_session() as session:
            result = await session.execute(query)
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {e}", exc_info=True)
            raise


async def create_tables() -> None:
    """Create the history table if it does not exist yet."""
    # Registers TranscriptionRecordModel on SQLModel.metadata
    import models.db_models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured")


async def close_engine() -> None:
    """Close the database engine and cleanup connections.

    Should be called during application shutdown.
    """
    global _engine, _async_session_maker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_maker = None
        logger.info("Database engine closed")

"""
Product Catalog Backend — Database Session Management
=======================================================

What:  Async SQLAlchemy engine construction, session factory, and FastAPI
       session dependency.
Why:   Centralizes all database connection logic in one place.
How:   create_app() builds one engine and one session factory from Settings
       and stores them on app.state; each request gets its own session that
       commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at app construction; sessions are created per-request.

There is no module-level engine. Passing the URL in explicitly lets tests
point a fresh app at a throwaway SQLite file without touching globals.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, used both by create_tables() and by
    Alembic for migrations.
    """
    pass


# ── Engine & Session Factory ──────────────────────────────────────────────
def build_engine(app_settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Pool options only apply to server databases; SQLite's async driver
    picks its own pool class and rejects pool sizing arguments.
    """
    options = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": app_settings.log_level == "DEBUG",
    }
    if not app_settings.is_sqlite:
        options.update(
            pool_size=app_settings.db_pool_size,
            max_overflow=app_settings.db_max_overflow,
            pool_pre_ping=app_settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(app_settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: records stay readable after the request commits
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's session factory
        2. Yields it to the route handler
        3. On error: rolls back and re-raises so the global error
           handlers can respond
        4. Always: closes the session (returns connection to pool)

    Writes are committed by ProductRepository.commit() inside the handler.
    The exit code of a yield dependency runs after the response is sent.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables(engine: AsyncEngine) -> None:
    """
    Create any missing tables for the registered models.

    Idempotent: existing tables are left untouched. Production deployments
    that manage the schema with Alembic turn this off via DB_CREATE_TABLES.
    """
    # Models must be imported so they are registered on Base.metadata
    from app.models import product  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def dispose_engine(engine: AsyncEngine) -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await engine.dispose()

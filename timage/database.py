"""
T-Image API: Database Session Management
===========================================

What:  Async SQLAlchemy engine, session factory, FastAPI session dependency
       and the insert helper that reports unique-constraint violations.
How:   The engine is created at import from `settings.database_url`. Each
       request gets its own AsyncSession that commits on success and rolls
       back on error.
Who:   Route handlers (via Depends), services, Alembic and the lifespan.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings and only
    apply to server databases. SQLite (used in tests and local runs) is
    created with SQLAlchemy's defaults for the aiosqlite dialect.
"""

import logging
import secrets
import time
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from timage.config import settings
from timage.exceptions import ConflictError

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: response models read attributes after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


def new_object_id() -> str:
    """
    Generate a 24-character hex identifier.

    Layout: 8 hex digits of the creation time in epoch seconds followed by
    16 random hex digits, so ids sort roughly by creation time.
    """
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{secrets.token_hex(8)}"


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (and the credential verifier,
           which shares the same per-request instance)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global handlers
        5. Always: closes the session

    Example usage in a route:
        @router.get("/images")
        async def list_images(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_record(session: AsyncSession, instance: Base) -> Base:
    """
    Insert `instance` and flush it so constraint violations surface now.

    The driver's duplicate-key IntegrityError becomes an explicit
    ConflictError; the session is rolled back so the request can still
    render its error response.

    Raises:
        ConflictError: a UNIQUE constraint rejected the row
    """
    session.add(instance)
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        logger.info(
            "Insert into %s rejected by constraint: %s",
            instance.__tablename__,
            type(e.orig).__name__ if e.orig is not None else "IntegrityError",
        )
        raise ConflictError(context={"table": instance.__tablename__})
    return instance


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables() -> None:
    """Create all tables registered on Base. Used when DB_CREATE_TABLES is set."""
    # Registers the models on Base.metadata
    import timage.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_connection() -> bool:
    """Run SELECT 1; returns False instead of raising when the DB is unreachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("Database unreachable: %s", str(e))
        return False


async def dispose_engine() -> None:
    """Close all pooled connections. Called on application shutdown."""
    await engine.dispose()

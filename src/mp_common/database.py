import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings
from src.mp_common.errors import InternalError, LockTimeoutError

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE raised when lock_timeout expires
_LOCK_NOT_AVAILABLE = "55P03"

_SET_LOCK_TIMEOUT_SQL = text("SELECT set_config('lock_timeout', :timeout, true)")


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session


def _sqlstate(exc: DBAPIError) -> str | None:
    """Dig the SQLSTATE out of a driver error (asyncpg keeps it on the cause)."""
    orig = exc.orig
    state = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if state is None and orig is not None:
        state = getattr(orig.__cause__, "sqlstate", None)
    return state


@asynccontextmanager
async def transaction(
    db: AsyncSession, lock_timeout_ms: int | None = None
) -> AsyncIterator[AsyncSession]:
    """Run the block in one transaction; commit on success, roll back on any error.

    AppErrors raised by the block propagate unchanged (after rollback).
    Store errors are translated: lock wait timeout -> LockTimeoutError,
    everything else -> InternalError. Both are retryable from the caller's side.

    Usage:
        async with transaction(db, lock_timeout_ms=settings.LOCK_TIMEOUT_MS):
            row = await repo.lock_for_sale(db, listing_id)
            ...
    """
    try:
        async with db.begin():
            if lock_timeout_ms:
                await db.execute(_SET_LOCK_TIMEOUT_SQL, {"timeout": f"{lock_timeout_ms}ms"})
            yield db
    except DBAPIError as e:
        if _sqlstate(e) == _LOCK_NOT_AVAILABLE:
            logger.warning("Lock wait timed out, transaction rolled back: %s", e.orig)
            raise LockTimeoutError() from e
        logger.exception("Store error, transaction rolled back")
        raise InternalError() from e
    except SQLAlchemyError as e:
        logger.exception("Store error, transaction rolled back")
        raise InternalError() from e

"""Engine/session plumbing and the transaction boundary.

The engine is built by the app factory (src/main.py) and handed around
explicitly; sessions are drawn from the factory stored on ``app.state``.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings
from src.sim_common.errors import AppError, StorageError

logger = logging.getLogger("sim.db")


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """Build the async engine for ``url`` (defaults to settings.DATABASE_URL)."""
    url = url or settings.DATABASE_URL
    kwargs: dict[str, Any] = {"echo": settings.DEBUG if echo is None else echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"timeout": 30}
    else:
        kwargs["pool_size"] = 20
        kwargs["max_overflow"] = 10

    engine = create_async_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet (dev/test; production uses Alembic)."""
    # Import ORM modules so they register with Base.metadata
    from src.sim_stock.infrastructure import db_models as _stock_models  # noqa: F401
    from src.sim_trading.infrastructure import db_models as _trading_models  # noqa: F401
    from src.sim_user.infrastructure import db_models as _user_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        yield session


@asynccontextmanager
async def transaction(db: AsyncSession, action: str) -> AsyncIterator[AsyncSession]:
    """All-or-nothing boundary: commit when the block succeeds, roll back otherwise.

    AppError propagates unchanged. Driver failures are logged with detail and
    re-raised as a generic StorageError.
    """
    try:
        yield db
        await db.commit()
    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("%s failed, transaction rolled back", action)
        raise StorageError() from exc

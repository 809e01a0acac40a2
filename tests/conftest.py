"""Shared test fixtures.

Every test that touches the database gets its own SQLite file under tmp_path,
with tables created from the ORM metadata.
"""

import os

# Must be set before config.settings is imported anywhere
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("PRICE_TICK_ENABLED", "false")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from collections.abc import AsyncIterator  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from src.main import create_app  # noqa: E402
from src.sim_common.database import (  # noqa: E402
    create_engine,
    create_session_factory,
    create_tables,
)


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    eng = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    await create_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(engine: AsyncEngine) -> FastAPI:
    return create_app(engine=engine, start_price_ticker=False)


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

"""
OpenMusic API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the whole suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── result_with:     builds the result object a mocked execute() returns
    ├── db_session:      real AsyncSession on in-memory SQLite (aiosqlite),
    │                    schema created from the ORM models, FKs enforced
    ├── test_client:     httpx AsyncClient on a fresh app whose
    │                    get_db_session is bound to db_session
    ├── make_token:      mints bearer tokens with the test ACCESS_TOKEN_KEY
    └── sample_image_bytes / sample_song_payload
"""

import os
import tempfile

# Settings are read at import time: configure the environment first
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="openmusic_test_")
os.environ["ACCESS_TOKEN_KEY"] = "test-access-token-key-0123456789abcdef"
os.environ["ACCESS_TOKEN_ALGORITHM"] = "HS256"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from openmusic import models  # noqa: F401  registers every table on Base.metadata
from openmusic.config import settings
from openmusic.database import Base, get_db_session


def _result_with(scalar=None, rows=None, first=None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.all.return_value = rows or []
    result.first.return_value = first
    return result


@pytest.fixture
def result_with():
    """
    Build the object AsyncSession.execute() resolves to.

    Usage:
        mock_db_session.execute.return_value = result_with(scalar="user-1")
    """
    return _result_with


@pytest.fixture
def mock_db_session():
    """
    A mock async database session.

    Configure `execute.return_value` (or `side_effect` for several
    statements) with result_with().
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_session():
    """In-memory SQLite session with the full schema and foreign keys enforced."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(db_session):
    """
    HTTP client for endpoint tests.

    Every request shares db_session and commits on success, rolls back on
    error, the same way get_db_session does.
    """
    from openmusic.main import create_app

    app = create_app()

    async def override_get_db_session():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Mint an access token the way the identity service does."""

    def _make(user_id: str, key: str = None, **claims) -> str:
        payload = {"id": user_id, **claims}
        return jwt.encode(
            payload,
            key or settings.access_token_key,
            algorithm=settings.access_token_algorithm,
        )

    return _make


@pytest.fixture
def auth_header(make_token) -> Callable[[str], Dict[str, str]]:
    def _header(user_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _header


@pytest.fixture
def sample_image_bytes():
    """Smallest PNG header libmagic recognizes as image/png."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 17


@pytest.fixture
def sample_song_payload():
    return {
        "title": "A",
        "year": 2020,
        "performer": "X",
        "genre": "pop",
        "duration": 180,
        "albumId": None,
    }

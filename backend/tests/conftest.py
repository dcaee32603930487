"""
Scriblink Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Services run against a fresh in-memory SQLite database (aiosqlite) per
       test; the HTTP client talks to the FastAPI app through ASGITransport.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine:        in-memory SQLite engine with every table created
    ├── db_session:       AsyncSession bound to db_engine
    ├── mock_db_session:  AsyncMock session for pure unit tests
    ├── mock_generator:   AsyncMock SummaryGenerator (no Gemini calls)
    └── test_client:      HTTPX AsyncClient with get_db_session overridden
"""

import os

# Override settings for testing BEFORE any scriblink imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import scriblink.models  # noqa: F401
from scriblink.database import Base, get_db_session
from scriblink.services.llm_base import SummaryGenerator


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    One in-memory database per test.

    StaticPool keeps a single connection, so every session of the test sees
    the same memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError): ...
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Service Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_generator():
    """SummaryGenerator whose generate() is an AsyncMock; set return_value per test."""
    generator = MagicMock(spec=SummaryGenerator)
    generator.generate = AsyncMock(return_value="")
    generator.health_check = AsyncMock(return_value=True)
    return generator


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    get_db_session is overridden to use the test engine, with the same
    commit-on-success / rollback-on-error contract as production.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from scriblink.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

"""Pytest configuration and fixtures."""

import os
import re

# Set config BEFORE importing app modules
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SESSION_HTTPS_ONLY", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.db.base import Base
from src.db.models import Service, Setting
from src.db.session import get_db
from src.main import app

TOKEN_PATTERN = re.compile(r"window\.sessionToken = '([^']*)'")


def _memory_engine():
    return create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
async def db_engine():
    """In-memory database with all tables created."""
    engine = _memory_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def broken_engine():
    """In-memory database without tables, so every query fails."""
    engine = _memory_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


@pytest.fixture
async def broken_session(broken_engine):
    async_session = async_sessionmaker(
        broken_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


@pytest.fixture
def seed_settings(db_session):
    """Insert rows into the settings table: ``await seed_settings({key: (value, type)})``."""

    async def _seed(rows: dict[str, tuple]) -> None:
        for key, (value, setting_type) in rows.items():
            db_session.add(
                Setting(setting_key=key, setting_value=value, setting_type=setting_type)
            )
        await db_session.commit()

    return _seed


@pytest.fixture
def seed_services(db_session):
    async def _seed(services: list[dict]) -> None:
        for service in services:
            db_session.add(Service(**service))
        await db_session.commit()

    return _seed


def _client_for(engine):
    session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(db_engine):
    """HTTP client for the app backed by the in-memory database."""
    async with _client_for(db_engine) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
async def broken_client(broken_engine):
    """HTTP client whose database has no tables."""
    async with _client_for(broken_engine) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def extract_token():
    """Read the session token a rendered page exposes to its scripts."""

    def _extract(html: str) -> str:
        match = TOKEN_PATTERN.search(html)
        assert match, "session token not found in page"
        return match.group(1)

    return _extract

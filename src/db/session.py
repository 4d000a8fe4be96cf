from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config import settings
# Registers the model tables on Base.metadata
from src.db import models  # noqa: F401
from src.db.base import Base

# SQLite (local development) does not take pool sizing arguments
_engine_options = {} if settings.is_sqlite else {"pool_size": 5, "max_overflow": 10}

engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    **_engine_options,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """Create missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings
from app.db.base import Base

# PostgreSQL via asyncpg in production, aiosqlite in local runs
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
)

# Session factory; history synchronization always runs on the session
# that flushes the owning entity, so one session == one transaction.
AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an AsyncSession.
    Ensures that session is closed after request.
    """
    async with AsyncSessionLocal() as session:
        yield session


async def create_schema() -> None:
    """Create any missing tables. Alembic owns the schema outside dev runs."""
    import app.models  # noqa: F401 - register mappers on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

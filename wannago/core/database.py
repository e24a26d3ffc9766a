"""Async database engine and session factory."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from wannago.core.config import get_settings

settings = get_settings()

# SQLite (local dev) does not accept pool sizing arguments
_pool_args = (
    {}
    if settings.database_url.startswith("sqlite")
    else {"pool_size": 20, "max_overflow": 10}
)

engine = create_async_engine(
    settings.database_url,
    echo=False,
    **_pool_args,
)

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session."""
    async with async_session_factory() as session:
        yield session


async def init_db() -> None:
    """Create all tables. Use migrations in production."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

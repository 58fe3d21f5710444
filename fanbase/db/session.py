# fanbase/db/session.py

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fanbase.core.config import settings

engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)

# Handlers serialize ORM objects after commit, so keep their state loaded.
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    """One session per request, closed when the response is sent."""
    async with AsyncSessionLocal() as session:
        yield session

# fanbase/services/search_service.py

import logging
from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.models.search import RecentSearch
from fanbase.utils.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)


async def list_searches(db: AsyncSession, user_id: UUID) -> List[RecentSearch]:
    """Return the user's recent searches, most recent first."""
    stmt = (
        select(RecentSearch)
        .where(RecentSearch.user_id == user_id)
        .order_by(RecentSearch.searched_at.desc())
    )
    try:
        result = await db.execute(stmt)
        return list(result.scalars().all())
    except SQLAlchemyError as exc:
        logger.error("DB error listing searches: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")


async def add_search(
    db: AsyncSession, user_id: UUID, query: str, now: datetime, limit: int
) -> List[RecentSearch]:
    """
    Record a search at the top of the list.
    An earlier search with the same text (any case) is replaced, and only the
    ``limit`` most recent searches are kept.
    """
    try:
        await db.execute(
            delete(RecentSearch).where(
                RecentSearch.user_id == user_id,
                func.lower(RecentSearch.query) == query.lower(),
            )
        )
        db.add(RecentSearch(user_id=user_id, query=query, searched_at=now))
        await db.flush()

        stale = (
            select(RecentSearch.id)
            .where(RecentSearch.user_id == user_id)
            .order_by(RecentSearch.searched_at.desc())
            .offset(limit)
        )
        stale_ids = list((await db.execute(stale)).scalars().all())
        if stale_ids:
            await db.execute(delete(RecentSearch).where(RecentSearch.id.in_(stale_ids)))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("DB error recording search: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    return await list_searches(db, user_id)


async def clear_searches(db: AsyncSession, user_id: UUID) -> None:
    try:
        await db.execute(delete(RecentSearch).where(RecentSearch.user_id == user_id))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("DB error clearing searches: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    logger.info("Search history cleared for user %s", user_id)

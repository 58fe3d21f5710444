# fanbase/services/favorite_service.py

import logging
from typing import List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.models.favorite import FavoriteTeam
from fanbase.utils.exceptions import BadRequestError, ServiceUnavailableError

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")

DUPLICATE_MESSAGE = "This team is already in your favorites"


async def list_favorites(db: AsyncSession, user_id: UUID) -> List[FavoriteTeam]:
    """Return the user's favorite teams, oldest first."""
    stmt = (
        select(FavoriteTeam)
        .where(FavoriteTeam.user_id == user_id)
        .order_by(FavoriteTeam.added_at, FavoriteTeam.team_name)
    )
    try:
        result = await db.execute(stmt)
        return list(result.scalars().all())
    except SQLAlchemyError as exc:
        logger.error("DB error listing favorites: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")


async def add_favorite(
    db: AsyncSession, user_id: UUID, team_id: str, team_name: str
) -> List[FavoriteTeam]:
    """Bookmark a team; a team can only be bookmarked once per user."""
    existing = await db.execute(
        select(FavoriteTeam.id).where(
            FavoriteTeam.user_id == user_id, FavoriteTeam.team_id == team_id
        )
    )
    if existing.scalars().first():
        raise BadRequestError(DUPLICATE_MESSAGE)

    db.add(FavoriteTeam(user_id=user_id, team_id=team_id, team_name=team_name))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise BadRequestError(DUPLICATE_MESSAGE)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("DB error adding favorite: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    audit_logger.info("Favorite added: user=%s team=%s", user_id, team_id)
    return await list_favorites(db, user_id)


async def remove_favorite(
    db: AsyncSession, user_id: UUID, team_id: str
) -> List[FavoriteTeam]:
    """Remove a team from favorites; removing an absent team is a no-op."""
    try:
        await db.execute(
            delete(FavoriteTeam).where(
                FavoriteTeam.user_id == user_id, FavoriteTeam.team_id == team_id
            )
        )
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("DB error removing favorite: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    audit_logger.info("Favorite removed: user=%s team=%s", user_id, team_id)
    return await list_favorites(db, user_id)

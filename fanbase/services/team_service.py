# fanbase/services/team_service.py

import logging
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.models.team import Team
from fanbase.schemas.team import RegionRead
from fanbase.utils.exceptions import NotFoundError, ServiceUnavailableError

logger = logging.getLogger(__name__)


async def list_teams(
    db: AsyncSession, country: Optional[str] = None, region: Optional[str] = None
) -> List[Team]:
    """Return all teams, optionally filtered by country and/or region."""
    stmt = select(Team).order_by(Team.team_name)
    if country:
        stmt = stmt.where(Team.country == country)
    if region:
        stmt = stmt.where(Team.region == region)
    try:
        result = await db.execute(stmt)
        return list(result.scalars().all())
    except SQLAlchemyError as exc:
        logger.error("DB error listing teams: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")


async def list_regions(db: AsyncSession) -> List[RegionRead]:
    """Group teams by (country, region), sorted by country then region."""
    stmt = (
        select(Team.country, Team.region, func.count(Team.id))
        .group_by(Team.country, Team.region)
        .order_by(Team.country, Team.region)
    )
    try:
        rows = (await db.execute(stmt)).all()
    except SQLAlchemyError as exc:
        logger.error("DB error aggregating regions: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    return [
        RegionRead(country=country, region=region, count=count)
        for country, region, count in rows
    ]


def _like_pattern(query: str) -> str:
    # LIKE wildcards typed by the user match literally
    escaped = (
        query.strip()
        .lower()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"


async def search_teams(db: AsyncSession, query: str) -> List[Team]:
    """Case-insensitive substring search over team name, country and league."""
    pattern = _like_pattern(query)
    stmt = (
        select(Team)
        .where(
            or_(
                func.lower(Team.team_name).like(pattern, escape="\\"),
                func.lower(Team.country).like(pattern, escape="\\"),
                func.lower(Team.league).like(pattern, escape="\\"),
            )
        )
        .order_by(Team.team_name)
    )
    try:
        result = await db.execute(stmt)
        teams = list(result.scalars().all())
    except SQLAlchemyError as exc:
        logger.error("DB error searching teams: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    logger.debug("Team search %r matched %d teams", query, len(teams))
    return teams


async def get_team(db: AsyncSession, team_id: str) -> Team:
    try:
        result = await db.execute(select(Team).where(Team.team_id == team_id))
        team = result.scalars().first()
    except SQLAlchemyError as exc:
        logger.error("DB error fetching team %s: %s", team_id, exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    if not team:
        raise NotFoundError("Team not found")
    return team

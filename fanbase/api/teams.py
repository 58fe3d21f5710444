# fanbase/api/teams.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.db.session import get_db
from fanbase.schemas.team import RegionRead, TeamMapRead, TeamRead, TeamSearch
from fanbase.services.team_service import (
    get_team,
    list_regions,
    list_teams,
    search_teams,
)

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.get("/map", response_model=List[TeamMapRead])
async def teams_for_map(db: AsyncSession = Depends(get_db)):
    """All teams with the fields needed to draw map markers."""
    return await list_teams(db)


@router.get("/regions", response_model=List[RegionRead])
async def regions(db: AsyncSession = Depends(get_db)):
    return await list_regions(db)


@router.get("/by-region", response_model=List[TeamRead])
async def teams_by_region(
    country: Optional[str] = None,
    region: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await list_teams(db, country=country, region=region)


@router.get("/search", response_model=List[TeamRead])
async def search(
    q: str = Query(..., min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    return await search_teams(db, q)


@router.post("/search", response_model=List[TeamRead])
async def search_by_body(data: TeamSearch, db: AsyncSession = Depends(get_db)):
    """Same search with the query in a JSON body, as the web client sends it."""
    return await search_teams(db, data.query)


@router.get("/{team_id}", response_model=TeamRead)
async def team_detail(team_id: str, db: AsyncSession = Depends(get_db)):
    return await get_team(db, team_id)

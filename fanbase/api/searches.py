# fanbase/api/searches.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.core.clock import Clock, get_clock
from fanbase.core.config import settings
from fanbase.db.session import get_db
from fanbase.models.user import User
from fanbase.schemas.search import SearchCreate, SearchRead
from fanbase.services.search_service import add_search, clear_searches, list_searches
from fanbase.utils.deps import get_current_user

router = APIRouter(prefix="/api/recent-searches", tags=["searches"])


@router.get("", response_model=List[SearchRead])
async def get_searches(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Recent searches, most recent first."""
    return await list_searches(db, current_user.id)


@router.post("", response_model=List[SearchRead], status_code=status.HTTP_201_CREATED)
async def create_search(
    data: SearchCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    return await add_search(
        db, current_user.id, data.query, clock.now(), settings.RECENT_SEARCHES_LIMIT
    )


@router.delete("", response_model=List[SearchRead])
async def delete_searches(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await clear_searches(db, current_user.id)
    return []

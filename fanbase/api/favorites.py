# fanbase/api/favorites.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.db.session import get_db
from fanbase.models.user import User
from fanbase.schemas.favorite import FavoriteTeamCreate, FavoriteTeamRead
from fanbase.services.favorite_service import (
    add_favorite,
    list_favorites,
    remove_favorite,
)
from fanbase.utils.deps import get_current_user

router = APIRouter(prefix="/api/favorite-teams", tags=["favorites"])


@router.get("", response_model=List[FavoriteTeamRead])
async def get_favorites(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await list_favorites(db, current_user.id)


@router.post(
    "", response_model=List[FavoriteTeamRead], status_code=status.HTTP_201_CREATED
)
async def create_favorite(
    data: FavoriteTeamCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a team to favorites and return the updated list."""
    return await add_favorite(db, current_user.id, data.team_id, data.team_name)


@router.delete("/{team_id}", response_model=List[FavoriteTeamRead])
async def delete_favorite(
    team_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove a team from favorites and return the remaining list."""
    return await remove_favorite(db, current_user.id, team_id)

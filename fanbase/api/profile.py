# fanbase/api/profile.py

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.core.clock import Clock, get_clock
from fanbase.db.session import get_db
from fanbase.models.user import User
from fanbase.schemas.profile import (
    ChangeHistoryItem,
    ChangeRead,
    ProfileRead,
    ProfileUpdate,
    ProfileUpdateResult,
    ProposedChange,
)
from fanbase.services.profile_service import (
    get_change_history,
    preview_profile_update,
    revert_profile_change,
    update_profile,
)
from fanbase.utils.deps import get_current_user

router = APIRouter(prefix="/api/users", tags=["profile"])

logger = logging.getLogger(__name__)


@router.get("/profile", response_model=ProfileRead)
async def read_profile(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return current_user


@router.post("/profile/preview", response_model=List[ProposedChange])
async def preview_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List the field changes an update would make, in a fixed field order,
    without saving anything.
    """
    return await preview_profile_update(
        db, current_user.id, data.model_dump(exclude_unset=True)
    )


@router.put("/profile", response_model=ProfileUpdateResult)
async def edit_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """Update profile fields; each modified field is logged in the change history."""
    user, applied = await update_profile(
        db, current_user.id, data.model_dump(exclude_unset=True), clock.now()
    )
    return ProfileUpdateResult(
        profile=ProfileRead.model_validate(user),
        changes=[ChangeRead.model_validate(change) for change in applied],
    )


@router.get("/profile/history", response_model=List[ChangeHistoryItem])
async def read_change_history(
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """Return the profile change history, oldest first."""
    history = await get_change_history(
        db, current_user.id, clock.now(), limit=limit, offset=offset
    )
    logger.info(
        "User %s fetched %d profile history entries", current_user.id, len(history)
    )
    return history


@router.post(
    "/profile/history/{change_id}/revert", response_model=ProfileUpdateResult
)
async def revert_profile(
    change_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
):
    """Revert a change made within the revert window."""
    user, revert_entry = await revert_profile_change(
        db, current_user.id, change_id, clock.now()
    )
    return ProfileUpdateResult(
        profile=ProfileRead.model_validate(user),
        changes=[ChangeRead.model_validate(revert_entry)],
    )

# fanbase/services/profile_service.py

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from fanbase.core.config import settings
from fanbase.models.enums import ProfileField
from fanbase.models.profile_change import ProfileChange
from fanbase.models.user import User
from fanbase.schemas.profile import ChangeHistoryItem, ProposedChange
from fanbase.services.change_tracker import (
    ATTRIBUTE_FIELDS,
    commit_changes,
    list_change_history,
    propose_changes,
    revert_change,
)
from fanbase.utils.exceptions import (
    AlreadyRevertedError,
    ConflictError,
    ExpiredError,
    NotFoundError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")


def revert_window() -> timedelta:
    return timedelta(hours=settings.PROFILE_REVERT_WINDOW_HOURS)


async def load_profile(db: AsyncSession, user_id: UUID) -> User:
    """
    Load a user profile together with its full change history.
    """
    try:
        stmt = (
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        user = result.scalars().first()
    except SQLAlchemyError as exc:
        logger.error("Error loading profile %s: %s", user_id, exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    if not user:
        logger.warning("Profile %s not found", user_id)
        raise NotFoundError("User not found")
    return user


async def save_profile(db: AsyncSession, user: User, now: datetime) -> User:
    """
    Persist a modified profile in one transaction.
    A concurrent save of the same profile makes this one fail with 409.
    """
    # rollback expires the instance, so error logs use the bound id
    user_id = user.id
    user.updated_at = now
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.warning("Concurrent modification of profile %s", user_id)
        raise ConflictError("Profile was modified concurrently, please retry")
    except IntegrityError:
        await db.rollback()
        logger.warning("Integrity error saving profile %s", user_id)
        raise ConflictError("This email is already in use")
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Error saving profile %s: %s", user_id, exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    return user


def _requested_fields(data: Dict[str, Any]) -> Dict[ProfileField, Optional[str]]:
    return {ATTRIBUTE_FIELDS[key]: value for key, value in data.items()}


async def _ensure_email_available(db: AsyncSession, user: User, email: str) -> None:
    try:
        stmt = select(User.id).where(func.lower(User.email) == email, User.id != user.id)
        taken = (await db.execute(stmt)).scalars().first()
    except SQLAlchemyError as exc:
        logger.error("Error checking email availability: %s", exc, exc_info=True)
        raise ServiceUnavailableError("Database temporarily unavailable")
    if taken:
        logger.warning("User %s tried to take email already in use", user.id)
        raise ConflictError("This email is already in use")


async def preview_profile_update(
    db: AsyncSession, user_id: UUID, data: Dict[str, Any]
) -> List[ProposedChange]:
    """Return the changes an update would apply, without applying them."""
    user = await load_profile(db, user_id)
    return propose_changes(user, _requested_fields(data))


async def update_profile(
    db: AsyncSession, user_id: UUID, data: Dict[str, Any], now: datetime
) -> Tuple[User, List[ProfileChange]]:
    """
    Apply a profile update and log one change entry per modified field.
    Nothing is written when no field actually changes.
    """
    user = await load_profile(db, user_id)
    change_set = propose_changes(user, _requested_fields(data))
    if not change_set:
        logger.info("Profile update for user %s changed nothing", user_id)
        return user, []

    for change in change_set:
        if change.field_name is ProfileField.EMAIL:
            await _ensure_email_available(db, user, change.new_value)

    user, applied = commit_changes(user, change_set, now)
    await save_profile(db, user, now)

    logger.info(
        "Profile %s updated: %s",
        user_id,
        ", ".join(change.field_name.value for change in applied),
    )
    audit_logger.info(
        "Profile update: user=%s fields=%s",
        user_id,
        [change.field_name.value for change in applied],
    )
    return user, applied


async def get_change_history(
    db: AsyncSession,
    user_id: UUID,
    now: datetime,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[ChangeHistoryItem]:
    """
    Return the user's change history, oldest first, optionally paginated.
    """
    user = await load_profile(db, user_id)
    history = list_change_history(user, now, revert_window())
    end = None if limit is None else offset + limit
    return history[offset:end]


async def revert_profile_change(
    db: AsyncSession, user_id: UUID, change_id: UUID, now: datetime
) -> Tuple[User, ProfileChange]:
    """
    Revert one logged change and persist the result.
    Returns the profile and the change entry recording the revert.
    """
    user = await load_profile(db, user_id)
    try:
        user = revert_change(user, change_id, now, revert_window())
    except (NotFoundError, AlreadyRevertedError, ExpiredError) as exc:
        logger.warning(
            "Revert of change %s for user %s rejected: %s",
            change_id,
            user_id,
            exc.detail,
        )
        raise
    await save_profile(db, user, now)

    revert_entry = user.change_history[-1]
    logger.info("Reverted change %s for user %s", change_id, user_id)
    audit_logger.info(
        "Profile revert: user=%s change=%s field=%s new_entry=%s",
        user_id,
        change_id,
        revert_entry.field_name.value,
        revert_entry.id,
    )
    return user, revert_entry

# fanbase/services/change_tracker.py
"""
Field-level profile change tracking with a time-boxed revert window.

Every function here works on a ``User`` instance handed in by the caller and
performs no I/O: loading and saving the profile is the caller's job, and the
current time is always passed in explicitly.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Mapping, Optional, Tuple, Union

from fanbase.models.enums import NO_PICTURE, ProfileField
from fanbase.models.profile_change import ProfileChange
from fanbase.models.user import User
from fanbase.schemas.profile import ChangeHistoryItem, ProposedChange
from fanbase.utils.exceptions import AlreadyRevertedError, ExpiredError, NotFoundError

REVERT_WINDOW = timedelta(hours=24)

# Tracked field -> User attribute
FIELD_ATTRIBUTES: Dict[ProfileField, str] = {
    ProfileField.FIRST_NAME: "first_name",
    ProfileField.LAST_NAME: "last_name",
    ProfileField.EMAIL: "email",
    ProfileField.PROFILE_PICTURE: "profile_picture",
}
ATTRIBUTE_FIELDS: Dict[str, ProfileField] = {
    attr: field for field, attr in FIELD_ATTRIBUTES.items()
}

FieldKey = Union[ProfileField, str]


def _as_utc(value: datetime) -> datetime:
    # Some backends (SQLite) hand back naive datetimes for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _normalize(field: ProfileField, value: Optional[str]) -> Optional[str]:
    if field is ProfileField.PROFILE_PICTURE and not value:
        return NO_PICTURE
    return value


def get_field_value(profile: User, field: ProfileField) -> str:
    """Return the current value of a tracked field, with the picture sentinel applied."""
    return _normalize(field, getattr(profile, FIELD_ATTRIBUTES[field]))


def _set_field_value(profile: User, field: ProfileField, value: str) -> None:
    setattr(profile, FIELD_ATTRIBUTES[field], value)


def propose_changes(
    profile: User, requested: Mapping[FieldKey, Optional[str]]
) -> List[ProposedChange]:
    """
    Compute the edits needed to move ``profile`` to the requested values.

    Only fields whose requested value differs from the current one are
    returned, always in ``ProfileField`` declaration order. A ``None`` value
    means "not requested" except for the picture, where it clears it.
    Raises ValueError for an unknown field name.
    """
    wanted = {ProfileField(key): value for key, value in requested.items()}

    proposed = []
    for field in ProfileField:
        if field not in wanted:
            continue
        new_value = _normalize(field, wanted[field])
        if new_value is None:
            continue
        old_value = get_field_value(profile, field)
        if new_value != old_value:
            proposed.append(
                ProposedChange(field_name=field, old_value=old_value, new_value=new_value)
            )
    return proposed


def _append_entry(
    profile: User, field: ProfileField, old_value: str, new_value: str, now: datetime
) -> ProfileChange:
    entry = ProfileChange(
        id=uuid.uuid4(),
        position=len(profile.change_history),
        field_name=field,
        old_value=old_value,
        new_value=new_value,
        changed_at=now,
        revertible=True,
    )
    profile.change_history.append(entry)
    return entry


def commit_changes(
    profile: User, change_set: List[ProposedChange], now: datetime
) -> Tuple[User, List[ProfileChange]]:
    """
    Apply every proposed change to ``profile`` and log one history entry each.

    The set may have been proposed against an older state of the profile, so
    each entry's old value is the field's value at commit time rather than
    the one carried by the proposal, and a change that no longer alters its
    field is dropped. All entries are planned before the profile is touched:
    an invalid field name raises with the profile and its history unchanged.
    """
    current: Dict[ProfileField, str] = {}
    planned = []
    for change in change_set:
        field = change.field_name
        if field not in current:
            current[field] = get_field_value(profile, field)
        if change.new_value == current[field]:
            continue
        planned.append((field, current[field], change.new_value))
        current[field] = change.new_value

    appended = []
    for field, old_value, new_value in planned:
        _set_field_value(profile, field, new_value)
        appended.append(_append_entry(profile, field, old_value, new_value, now))
    return profile, appended


def is_within_window(
    entry: ProfileChange, now: datetime, window: timedelta = REVERT_WINDOW
) -> bool:
    """True while less than ``window`` has elapsed since the entry was recorded."""
    return now - _as_utc(entry.changed_at) < window


def list_change_history(
    profile: User, now: datetime, window: timedelta = REVERT_WINDOW
) -> List[ChangeHistoryItem]:
    """
    Return the profile's change history, oldest first, with ``revertible``
    re-derived for ``now`` and the age of each entry in whole hours.
    """
    items = []
    for entry in profile.change_history:
        elapsed = now - _as_utc(entry.changed_at)
        items.append(
            ChangeHistoryItem(
                id=entry.id,
                field_name=entry.field_name,
                old_value=entry.old_value,
                new_value=entry.new_value,
                changed_at=_as_utc(entry.changed_at),
                revertible=entry.revertible and elapsed < window,
                hours_ago=elapsed // timedelta(hours=1),
            )
        )
    return items


def find_change(profile: User, change_id: uuid.UUID) -> ProfileChange:
    for entry in profile.change_history:
        if entry.id == change_id:
            return entry
    raise NotFoundError("Change not found")


def revert_change(
    profile: User,
    change_id: uuid.UUID,
    now: datetime,
    window: timedelta = REVERT_WINDOW,
) -> User:
    """
    Undo a logged change by applying its inverse and logging that as a new entry.

    The original entry is marked non-revertible for good. The field is set
    back to the entry's old value even if it was edited again since.

    Raises:
        NotFoundError: no entry with ``change_id``.
        AlreadyRevertedError: the entry was reverted before.
        ExpiredError: the entry is outside the revert window.
    """
    entry = find_change(profile, change_id)
    if not entry.revertible:
        raise AlreadyRevertedError()
    if not is_within_window(entry, now, window):
        raise ExpiredError()

    _set_field_value(profile, entry.field_name, entry.old_value)
    entry.revertible = False
    _append_entry(profile, entry.field_name, entry.new_value, entry.old_value, now)
    return profile

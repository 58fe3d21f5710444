"""Unit tests for the profile change tracker.

The tracker never touches the database, so these tests work on transient
User instances and pass explicit timestamps.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from fanbase.models import User
from fanbase.models.enums import NO_PICTURE, ProfileField
from fanbase.schemas.profile import ProposedChange
from fanbase.services.change_tracker import (
    REVERT_WINDOW,
    commit_changes,
    get_field_value,
    list_change_history,
    propose_changes,
    revert_change,
)
from fanbase.utils.exceptions import AlreadyRevertedError, ExpiredError, NotFoundError

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_user(**overrides) -> User:
    values = {
        "id": uuid.uuid4(),
        "first_name": "John",
        "last_name": "Smith",
        "email": "john@example.com",
        "hashed_password": "x",
        "profile_picture": None,
    }
    values.update(overrides)
    return User(**values)


def commit(user: User, requested: dict, now: datetime = T0):
    return commit_changes(user, propose_changes(user, requested), now)


# ---------------------------------------------------------------------------
# propose_changes
# ---------------------------------------------------------------------------


def test_propose_only_includes_changed_fields():
    user = make_user()
    proposed = propose_changes(
        user, {"firstName": "John", "lastName": "Smyth", "email": "john@example.com"}
    )
    assert proposed == [
        ProposedChange(
            field_name=ProfileField.LAST_NAME, old_value="Smith", new_value="Smyth"
        )
    ]


def test_propose_uses_fixed_field_order():
    user = make_user()
    proposed = propose_changes(
        user,
        {
            ProfileField.PROFILE_PICTURE: "data:image/png;base64,AAAA",
            ProfileField.EMAIL: "jon@example.com",
            ProfileField.FIRST_NAME: "Jon",
            ProfileField.LAST_NAME: "Smyth",
        },
    )
    assert [change.field_name for change in proposed] == [
        ProfileField.FIRST_NAME,
        ProfileField.LAST_NAME,
        ProfileField.EMAIL,
        ProfileField.PROFILE_PICTURE,
    ]


def test_propose_empty_when_nothing_differs():
    user = make_user()
    assert propose_changes(user, {}) == []
    assert propose_changes(user, {"firstName": "John", "lastName": "Smith"}) == []


@pytest.mark.parametrize("stored", [None, "", NO_PICTURE])
@pytest.mark.parametrize("requested", [None, "", NO_PICTURE])
def test_picture_absence_is_equivalent_to_none_sentinel(stored, requested):
    user = make_user(profile_picture=stored)
    assert propose_changes(user, {"profilePicture": requested}) == []


def test_picture_removal_proposes_none_sentinel():
    user = make_user(profile_picture="data:image/png;base64,AAAA")
    (change,) = propose_changes(user, {"profilePicture": None})
    assert change.old_value == "data:image/png;base64,AAAA"
    assert change.new_value == NO_PICTURE


def test_propose_skips_unrequested_name_fields():
    user = make_user()
    assert propose_changes(user, {"firstName": None, "email": None}) == []


def test_propose_rejects_unknown_field():
    with pytest.raises(ValueError):
        propose_changes(make_user(), {"password": "hunter2"})


def test_propose_has_no_side_effects():
    user = make_user()
    propose_changes(user, {"firstName": "Jon"})
    assert user.first_name == "John"
    assert user.change_history == []


# ---------------------------------------------------------------------------
# commit_changes
# ---------------------------------------------------------------------------


def test_commit_applies_values_and_appends_one_entry_per_change():
    user = make_user()
    user, appended = commit(
        user, {"email": "jon@example.com", "firstName": "Jon", "lastName": "Smyth"}
    )

    assert (user.first_name, user.last_name, user.email) == (
        "Jon",
        "Smyth",
        "jon@example.com",
    )
    assert appended == user.change_history
    assert [entry.field_name for entry in appended] == [
        ProfileField.FIRST_NAME,
        ProfileField.LAST_NAME,
        ProfileField.EMAIL,
    ]
    assert [entry.position for entry in appended] == [0, 1, 2]
    for entry in appended:
        assert entry.changed_at == T0
        assert entry.revertible is True
        assert isinstance(entry.id, uuid.UUID)
    assert len({entry.id for entry in appended}) == 3


def test_commit_records_old_and_new_values():
    user = make_user()
    _, (entry,) = commit(user, {"firstName": "Jon"})
    assert entry.old_value == "John"
    assert entry.new_value == "Jon"


def test_commit_empty_change_set_is_a_no_op():
    user = make_user()
    user, appended = commit_changes(user, [], T0)
    assert appended == []
    assert user.change_history == []


def test_commit_stale_change_set_records_value_at_commit_time():
    user = make_user()
    stale = propose_changes(user, {"firstName": "Jon"})
    commit(user, {"firstName": "Johnny"}, T0)

    _, (entry,) = commit_changes(user, stale, T0 + timedelta(minutes=1))

    assert user.first_name == "Jon"
    assert (entry.old_value, entry.new_value) == ("Johnny", "Jon")


def test_commit_drops_change_that_no_longer_alters_the_field():
    user = make_user()
    stale = propose_changes(user, {"firstName": "Jon", "lastName": "Smyth"})
    commit(user, {"firstName": "Jon"}, T0)

    _, appended = commit_changes(user, stale, T0 + timedelta(minutes=1))

    assert [(e.field_name, e.old_value) for e in appended] == [
        (ProfileField.LAST_NAME, "Smith")
    ]
    assert len(user.change_history) == 2


def test_commit_chains_repeated_field_within_one_set():
    user = make_user()
    change_set = [
        ProposedChange(
            field_name=ProfileField.FIRST_NAME, old_value="John", new_value="Jon"
        ),
        ProposedChange(
            field_name=ProfileField.FIRST_NAME, old_value="John", new_value="Jack"
        ),
    ]

    _, (first, second) = commit_changes(user, change_set, T0)

    assert user.first_name == "Jack"
    assert (first.old_value, first.new_value) == ("John", "Jon")
    assert (second.old_value, second.new_value) == ("Jon", "Jack")


def test_current_value_matches_latest_entry_for_field():
    user = make_user()
    commit(user, {"firstName": "Jon"}, T0)
    commit(user, {"lastName": "Smyth"}, T0 + timedelta(minutes=1))
    commit(user, {"firstName": "Johnny"}, T0 + timedelta(minutes=2))

    latest = [e for e in user.change_history if e.field_name is ProfileField.FIRST_NAME]
    assert get_field_value(user, ProfileField.FIRST_NAME) == latest[-1].new_value
    assert latest[-1].old_value == latest[-2].new_value


# ---------------------------------------------------------------------------
# list_change_history
# ---------------------------------------------------------------------------


def test_history_is_oldest_first_with_hours_ago():
    user = make_user()
    commit(user, {"firstName": "Jon"}, T0)
    commit(user, {"lastName": "Smyth"}, T0 + timedelta(hours=3))

    history = list_change_history(user, T0 + timedelta(hours=5, minutes=59))
    assert [item.field_name for item in history] == [
        ProfileField.FIRST_NAME,
        ProfileField.LAST_NAME,
    ]
    assert [item.hours_ago for item in history] == [5, 2]
    assert all(item.revertible for item in history)


def test_history_marks_expired_entries_not_revertible():
    user = make_user()
    commit(user, {"firstName": "Jon"}, T0)
    history = list_change_history(user, T0 + timedelta(hours=24))
    assert history[0].revertible is False
    assert history[0].hours_ago == 24
    # listing never mutates the stored flag
    assert user.change_history[0].revertible is True


def test_history_respects_custom_window():
    user = make_user()
    commit(user, {"firstName": "Jon"}, T0)
    history = list_change_history(user, T0 + timedelta(hours=2), timedelta(hours=1))
    assert history[0].revertible is False


def test_history_accepts_naive_stored_timestamps():
    user = make_user()
    _, (entry,) = commit(user, {"firstName": "Jon"}, T0)
    entry.changed_at = T0.replace(tzinfo=None)
    (item,) = list_change_history(user, T0 + timedelta(hours=1))
    assert item.hours_ago == 1
    assert item.changed_at == T0


# ---------------------------------------------------------------------------
# revert_change
# ---------------------------------------------------------------------------


def test_revert_scenario_within_window():
    user = make_user()
    _, (entry,) = commit(user, {"firstName": "Jon"}, T0)
    assert len(user.change_history) == 1

    revert_change(user, entry.id, T0 + timedelta(hours=1))

    assert user.first_name == "John"
    assert len(user.change_history) == 2
    first, second = user.change_history
    assert first.revertible is False
    assert (second.old_value, second.new_value) == ("Jon", "John")
    assert second.field_name is ProfileField.FIRST_NAME
    assert second.revertible is True
    assert second.changed_at == T0 + timedelta(hours=1)
    assert second.position == 1


def test_revert_after_window_fails_without_mutation():
    user = make_user()
    _, (entry,) = commit(user, {"firstName": "Jon"}, T0)

    with pytest.raises(ExpiredError):
        revert_change(user, entry.id, T0 + timedelta(hours=25))

    assert user.first_name == "Jon"
    assert len(user.change_history) == 1
    assert entry.revertible is True


def test_revert_window_boundary():
    user = make_user()
    _, (entry,) = commit(user, {"firstName": "Jon"}, T0)

    with pytest.raises(ExpiredError):
        revert_change(user, entry.id, T0 + REVERT_WINDOW)
    with pytest.raises(ExpiredError):
        revert_change(user, entry.id, T0 + REVERT_WINDOW + timedelta(seconds=1))

    revert_change(user, entry.id, T0 + REVERT_WINDOW - timedelta(seconds=1))
    assert user.first_name == "John"


def test_revert_twice_fails_with_already_reverted():
    user = make_user()
    _, (entry,) = commit(user, {"firstName": "Jon"}, T0)
    revert_change(user, entry.id, T0 + timedelta(minutes=5))

    with pytest.raises(AlreadyRevertedError):
        revert_change(user, entry.id, T0 + timedelta(minutes=6))
    # the terminal flag wins over the time check
    with pytest.raises(AlreadyRevertedError):
        revert_change(user, entry.id, T0 + timedelta(days=3))
    assert len(user.change_history) == 2


def test_revert_unknown_id_fails_with_not_found():
    user = make_user()
    commit(user, {"firstName": "Jon"}, T0)
    with pytest.raises(NotFoundError):
        revert_change(user, uuid.uuid4(), T0)


def test_revert_of_a_revert_is_allowed():
    user = make_user()
    _, (entry,) = commit(user, {"firstName": "Jon"}, T0)
    revert_change(user, entry.id, T0 + timedelta(hours=1))
    revert_entry = user.change_history[-1]

    revert_change(user, revert_entry.id, T0 + timedelta(hours=2))

    assert user.first_name == "Jon"
    assert [e.revertible for e in user.change_history] == [False, False, True]
    assert (user.change_history[-1].old_value, user.change_history[-1].new_value) == (
        "John",
        "Jon",
    )


def test_revert_overwrites_intervening_edit():
    user = make_user()
    _, (first,) = commit(user, {"firstName": "Jon"}, T0)
    commit(user, {"firstName": "Johnny"}, T0 + timedelta(minutes=10))

    revert_change(user, first.id, T0 + timedelta(minutes=20))

    assert user.first_name == "John"
    last = user.change_history[-1]
    assert (last.old_value, last.new_value) == ("Jon", "John")
    assert len(user.change_history) == 3


def test_revert_picture_restores_none_sentinel():
    user = make_user()
    _, (entry,) = commit(user, {"profilePicture": "data:image/png;base64,AAAA"}, T0)
    assert entry.old_value == NO_PICTURE

    revert_change(user, entry.id, T0 + timedelta(hours=1))

    assert get_field_value(user, ProfileField.PROFILE_PICTURE) == NO_PICTURE
    assert propose_changes(user, {"profilePicture": None}) == []

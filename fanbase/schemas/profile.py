# fanbase/schemas/profile.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from fanbase.models.enums import NO_PICTURE, ProfileField


class ProposedChange(BaseModel):
    """
    One field edit computed from a profile update request, not yet applied.
    """

    model_config = ConfigDict(frozen=True)

    field_name: ProfileField = Field(..., description="Profile field being changed")
    old_value: str = Field(..., description="Current value of the field")
    new_value: str = Field(..., description="Requested value of the field")


class ChangeRead(BaseModel):
    """
    Stored profile change entry.
    """

    id: UUID = Field(..., description="Unique ID of the change entry")
    field_name: ProfileField
    old_value: str
    new_value: str
    changed_at: datetime = Field(..., description="When the change was applied")
    revertible: bool = Field(
        ..., description="False once the change has been reverted"
    )

    model_config = ConfigDict(from_attributes=True)


class ChangeHistoryItem(ChangeRead):
    """
    Change entry as displayed in the history list.
    ``revertible`` also accounts for the revert window at read time.
    """

    hours_ago: int = Field(..., description="Whole hours since the change")


class ProfileRead(BaseModel):
    """
    Read-only profile schema for API responses.
    """

    id: UUID
    first_name: str
    last_name: str
    email: EmailStr
    profile_picture: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("profile_picture")
    def hide_picture_sentinel(cls, v):
        return None if v in (None, "", NO_PICTURE) else v


class ProfileUpdate(BaseModel):
    """
    Request body for profile edits. Omitted fields are left untouched;
    an explicit null ``profile_picture`` removes the picture.
    """

    first_name: Optional[str] = Field(None, examples=["John"])
    last_name: Optional[str] = Field(None, examples=["Smith"])
    email: Optional[EmailStr] = Field(None, examples=["john@example.com"])
    profile_picture: Optional[str] = Field(
        None, examples=["data:image/png;base64,iVBORw0KGgo="]
    )

    @field_validator("first_name", "last_name")
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if len(v) < 2:
            raise ValueError("must be at least 2 characters long")
        if len(v) > 50:
            raise ValueError("cannot exceed 50 characters")
        return v

    @field_validator("email")
    def normalize_email(cls, v):
        return v.lower() if v is not None else v


class ProfileUpdateResult(BaseModel):
    """
    Response for profile updates and reverts: the saved profile plus the
    change entries appended by this request.
    """

    profile: ProfileRead
    changes: List[ChangeRead] = Field(default_factory=list)

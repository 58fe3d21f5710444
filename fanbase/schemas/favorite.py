# fanbase/schemas/favorite.py

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FavoriteTeamCreate(BaseModel):
    team_id: str = Field(..., min_length=1, max_length=64, examples=["man-utd"])
    team_name: str = Field(
        ..., min_length=1, max_length=100, examples=["Manchester United"]
    )

    @field_validator("team_id", "team_name")
    def strip_value(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class FavoriteTeamRead(BaseModel):
    team_id: str
    team_name: str
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)

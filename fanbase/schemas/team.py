# fanbase/schemas/team.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RecentPerformance(BaseModel):
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals: int = 0
    goals_against: int = 0


class TeamMapRead(BaseModel):
    """
    Projection of a team used to place markers on the map.
    """

    team_id: str = Field(..., examples=["man-utd"])
    team_name: str = Field(..., examples=["Manchester United"])
    country: str
    region: str
    latitude: float
    longitude: float
    league: str
    logo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TeamRead(TeamMapRead):
    """
    Full team details.
    """

    founded: Optional[int] = None
    stadium: Optional[str] = None
    description: Optional[str] = None
    recent_performance: Optional[RecentPerformance] = None


class RegionRead(BaseModel):
    country: str
    region: str
    count: int = Field(..., description="Number of teams in the region")


class TeamSearch(BaseModel):
    query: str = Field(..., min_length=1, max_length=100, examples=["Barcelona"])

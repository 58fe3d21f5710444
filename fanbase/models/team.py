# fanbase/models/team.py

import uuid

from sqlalchemy import JSON, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fanbase.db.base import Base


class Team(Base):
    """
    ORM model for a soccer club shown on the map.
    """

    __tablename__ = "teams"
    __table_args__ = (
        Index("ix_teams_country_region", "country", "region"),
        Index("ix_teams_location", "latitude", "longitude"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Public slug, e.g. "man-utd"
    team_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    team_name: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(64), nullable=False)
    region: Mapped[str] = mapped_column(String(64), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    league: Mapped[str] = mapped_column(String(100), nullable=False, default="Unknown")
    founded: Mapped[int | None] = mapped_column(Integer, nullable=True)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    stadium: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # {"wins", "draws", "losses", "goals", "goals_against"}
    recent_performance: Mapped[dict | None] = mapped_column(JSON, nullable=True)

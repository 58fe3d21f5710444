# fanbase/models/user.py

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import Boolean, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fanbase.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    ORM model for a registered fan and their editable profile.

    ``change_history`` is loaded eagerly and kept in insertion order so the
    change tracker can work on the instance without further queries.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Data URI or URL; NULL and "none" both mean no picture
    profile_picture: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    # Optimistic concurrency: a save against a stale version raises StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    change_history: Mapped[List["ProfileChange"]] = relationship(  # noqa: F821
        "ProfileChange",
        back_populates="user",
        order_by="ProfileChange.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

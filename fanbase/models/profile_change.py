# fanbase/models/profile_change.py

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fanbase.db.base import Base
from fanbase.models.enums import ProfileField


class ProfileChange(Base):
    """
    ORM model for one logged profile field edit.

    Values are never rewritten after insert. The only mutation allowed is
    flipping ``revertible`` to False once the entry has been reverted.
    """

    __tablename__ = "profile_changes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user = relationship("User", back_populates="change_history")

    # Insertion index within the user's history (entries of one commit share changed_at)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    field_name: Mapped[ProfileField] = mapped_column(
        SAEnum(
            ProfileField,
            name="profile_field",
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    old_value: Mapped[str] = mapped_column(Text, nullable=False)
    new_value: Mapped[str] = mapped_column(Text, nullable=False)

    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Terminal flag: True until the entry is consumed by a revert
    revertible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

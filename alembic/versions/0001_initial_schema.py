"""initial schema: users, profile changes, teams, favorites, searches

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PROFILE_FIELDS = ("firstName", "lastName", "email", "profilePicture")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("profile_picture", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profile_changes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column(
            "field_name",
            sa.Enum(*PROFILE_FIELDS, name="profile_field", native_enum=False),
            nullable=False,
        ),
        sa.Column("old_value", sa.Text(), nullable=False),
        sa.Column("new_value", sa.Text(), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revertible", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_profile_changes_user_id", "profile_changes", ["user_id"])

    op.create_table(
        "teams",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("team_id", sa.String(64), nullable=False, unique=True),
        sa.Column("team_name", sa.String(100), nullable=False),
        sa.Column("country", sa.String(64), nullable=False),
        sa.Column("region", sa.String(64), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("league", sa.String(100), nullable=False),
        sa.Column("founded", sa.Integer(), nullable=True),
        sa.Column("logo", sa.Text(), nullable=True),
        sa.Column("stadium", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("recent_performance", sa.JSON(), nullable=True),
    )
    op.create_index("ix_teams_country_region", "teams", ["country", "region"])
    op.create_index("ix_teams_location", "teams", ["latitude", "longitude"])

    op.create_table(
        "favorite_teams",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("team_id", sa.String(64), nullable=False),
        sa.Column("team_name", sa.String(100), nullable=False),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "team_id", name="uq_favorite_teams_user_team"),
    )
    op.create_index("ix_favorite_teams_user_id", "favorite_teams", ["user_id"])

    op.create_table(
        "recent_searches",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("query", sa.String(200), nullable=False),
        sa.Column("searched_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_recent_searches_user_id", "recent_searches", ["user_id"])


def downgrade() -> None:
    op.drop_table("recent_searches")
    op.drop_table("favorite_teams")
    op.drop_table("teams")
    op.drop_table("profile_changes")
    op.drop_table("users")

# Import every model so the mapper registry and Alembic see all tables.
from fanbase.models.favorite import FavoriteTeam
from fanbase.models.profile_change import ProfileChange
from fanbase.models.search import RecentSearch
from fanbase.models.team import Team
from fanbase.models.user import User

__all__ = ["FavoriteTeam", "ProfileChange", "RecentSearch", "Team", "User"]

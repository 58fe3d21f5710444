# fanbase/db/seed.py
"""
Populate the teams table with a bundled list of clubs.

Run with: python -m fanbase.db.seed
"""

import asyncio
import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from fanbase.models.team import Team

logger = logging.getLogger(__name__)

# (team_id, name, country, region, lat, lon, league, founded, stadium,
#  (wins, draws, losses, goals, goals_against))
TEAMS = [
    ("man-utd", "Manchester United", "England", "Europe", 53.4631, -2.2913,
     "Premier League", 1878, "Old Trafford", (18, 5, 7, 67, 38)),
    ("liverpool", "Liverpool FC", "England", "Europe", 53.431, -2.9608,
     "Premier League", 1892, "Anfield", (20, 4, 6, 72, 35)),
    ("real-madrid", "Real Madrid", "Spain", "Europe", 40.4531, -3.6883,
     "La Liga", 1902, "Santiago Bernabéu", (22, 3, 5, 78, 28)),
    ("barcelona", "FC Barcelona", "Spain", "Europe", 41.3815, 2.122,
     "La Liga", 1899, "Camp Nou", (19, 5, 6, 70, 32)),
    ("psg", "Paris Saint-Germain", "France", "Europe", 48.8416, 2.4534,
     "Ligue 1", 1970, "Parc des Princes", (21, 4, 5, 75, 30)),
    ("juventus", "Juventus", "Italy", "Europe", 45.1095, 7.6385,
     "Serie A", 1897, "Allianz Stadium", (18, 6, 6, 65, 34)),
    ("bayern-munich", "Bayern Munich", "Germany", "Europe", 48.2188, 11.6247,
     "Bundesliga", 1900, "Allianz Arena", (23, 2, 5, 82, 25)),
    ("flamengo", "Flamengo", "Brazil", "South America", -22.9068, -43.1729,
     "Campeonato Brasileiro", 1895, "Estádio Nilton Santos", (20, 5, 5, 68, 32)),
    ("santos", "Santos FC", "Brazil", "South America", -23.9625, -46.2637,
     "Campeonato Brasileiro", 1912, "Vila Belmiro", (17, 6, 7, 60, 38)),
    ("boca-juniors", "Boca Juniors", "Argentina", "South America", -34.6349, -58.2647,
     "Primera División", 1905, "La Bombonera", (19, 4, 7, 66, 35)),
    ("river-plate", "River Plate", "Argentina", "South America", -34.6026, -58.4594,
     "Primera División", 1901, "Monumental Stadium", (21, 3, 6, 74, 30)),
    ("al-hilal", "Al-Hilal", "Saudi Arabia", "Asia", 24.7928, 46.6753,
     "Saudi Pro League", 1957, "King Fahd Stadium", (22, 2, 6, 79, 28)),
]  # fmt: skip


def build_teams() -> list[Team]:
    teams = []
    for row in TEAMS:
        team_id, name, country, region, lat, lon, league, founded, stadium, record = row
        wins, draws, losses, goals, goals_against = record
        teams.append(
            Team(
                team_id=team_id,
                team_name=name,
                country=country,
                region=region,
                latitude=lat,
                longitude=lon,
                league=league,
                founded=founded,
                stadium=stadium,
                recent_performance={
                    "wins": wins,
                    "draws": draws,
                    "losses": losses,
                    "goals": goals,
                    "goals_against": goals_against,
                },
            )
        )
    return teams


async def seed_teams(db: AsyncSession) -> int:
    """Replace every stored team with the bundled list. Returns the team count."""
    await db.execute(delete(Team))
    teams = build_teams()
    db.add_all(teams)
    await db.commit()
    logger.info("Seeded %d teams", len(teams))
    return len(teams)


async def main() -> None:
    from fanbase.core.config import settings
    from fanbase.core.logging import init_logging
    from fanbase.db.session import AsyncSessionLocal, engine

    init_logging(settings.LOG_DIR)
    async with AsyncSessionLocal() as session:
        await seed_teams(session)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())

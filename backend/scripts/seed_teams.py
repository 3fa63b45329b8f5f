"""
Seed the teams table from data/teams.json.

Teams already in the catalog (matched by name) are left untouched; teams are
immutable once created.
"""
import json
import logging
from pathlib import Path

from bounty.database import SessionLocal, create_db_and_tables
from bounty.models.team import Team
from bounty.services import team_service

PROJECT_ROOT = Path(__file__).resolve().parents[1]

logger = logging.getLogger(__name__)


def load_teams_from_json(json_path: Path) -> list[dict]:
    """Load team data from JSON file."""
    with open(json_path, "r", encoding="utf-8") as f:
        return json.load(f)


def seed_teams(json_path: Path | None = None) -> int:
    """
    Insert every team not already in the catalog.
    Returns the number of teams inserted.
    """
    if json_path is None:
        json_path = PROJECT_ROOT / "data" / "teams.json"

    teams_data = load_teams_from_json(json_path)
    count = 0

    db = SessionLocal()
    try:
        existing = {name for (name,) in db.query(Team.name).all()}
        db.commit()
        for team in teams_data:
            if team["name"] in existing:
                continue
            team_service.create_team(db, team["name"], team["seed"])
            existing.add(team["name"])
            count += 1
    finally:
        db.close()

    return count


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    logger.info("Creating database tables...")
    create_db_and_tables()

    logger.info("Seeding teams from data/teams.json...")
    count = seed_teams()
    logger.info("Done! %d teams seeded.", count)


if __name__ == "__main__":
    main()

"""Team service — the read-only team catalog."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from bounty.errors import NotFoundError, ValidationError
from bounty.models.enums import TeamCategory
from bounty.models.team import Team, FAVORITE_SEEDS, UPSET_SEEDS

logger = logging.getLogger(__name__)


def create_team(db: Session, name: str, seed: int) -> Team:
    """Add a team to the catalog. Teams are immutable once created."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Team name is required")
    if not isinstance(seed, int) or isinstance(seed, bool) or not 1 <= seed <= 16:
        raise ValidationError(f"Seed must be an integer from 1 to 16, got {seed!r}")

    team = Team(name=name, seed=seed)
    db.add(team)
    db.commit()
    db.refresh(team)
    logger.info("Team %s created (%s, seed %d)", team.id, team.name, team.seed)
    return team


def get_team(db: Session, team_id: str) -> Team:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFoundError(f"Team {team_id} not found")
    return team


def list_teams(db: Session, category: Optional[TeamCategory] = None) -> list[Team]:
    """List teams by seed, optionally only favorites or upset candidates."""
    query = db.query(Team)
    if category == TeamCategory.FAVORITE:
        query = query.filter(Team.seed.between(FAVORITE_SEEDS.start, FAVORITE_SEEDS.stop - 1))
    elif category == TeamCategory.UPSET:
        query = query.filter(Team.seed.between(UPSET_SEEDS.start, UPSET_SEEDS.stop - 1))
    return query.order_by(Team.seed.asc(), Team.name.asc()).all()

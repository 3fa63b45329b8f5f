"""Team model — static catalog data seeded before play."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, String, Integer, DateTime, CheckConstraint

from bounty.database import Base
from bounty.models.enums import TeamCategory

FAVORITE_SEEDS = range(1, 5)
UPSET_SEEDS = range(9, 17)


def category_for_seed(seed: int) -> Optional[TeamCategory]:
    """Seeds 1-4 are favorites, 9-16 upset candidates, 5-8 are not pickable."""
    if seed in FAVORITE_SEEDS:
        return TeamCategory.FAVORITE
    if seed in UPSET_SEEDS:
        return TeamCategory.UPSET
    return None


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    seed = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("seed BETWEEN 1 AND 16", name="ck_team_seed_range"),
    )

    @property
    def category(self) -> Optional[TeamCategory]:
        return category_for_seed(self.seed)

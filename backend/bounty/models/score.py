"""Score models — running totals and the applied-results ledger."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint

from bounty.database import Base


class Score(Base):
    __tablename__ = "scores"

    user_id = Column(String(255), primary_key=True)
    current_score = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class ScoredResult(Base):
    """One row per (team, round) already applied to the scores."""

    __tablename__ = "scored_results"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    team_id = Column(String(36), ForeignKey("teams.id"), nullable=False)
    round = Column(String(50), nullable=False)
    points = Column(Integer, nullable=False)
    holders = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("team_id", "round", name="uq_scored_team_round"),
    )

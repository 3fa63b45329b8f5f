"""Pick model — the unit of team ownership.

Trades and auctions move a Pick between users by rewriting user_id; the row
itself is never deleted while the tournament runs.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from bounty.database import Base
from bounty.models.enums import TeamCategory, enum_column_type


class Entry(Base):
    """One row per user who has committed a pick set."""

    __tablename__ = "entries"

    user_id = Column(String(255), primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class Pick(Base):
    __tablename__ = "picks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    team_id = Column(String(36), ForeignKey("teams.id"), nullable=False, index=True)
    # Category at pick time
    category = Column(enum_column_type(TeamCategory, "pick_category"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    team = relationship("Team")

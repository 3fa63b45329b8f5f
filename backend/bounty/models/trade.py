"""Trade model — a bilateral offer to swap team ownership."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from bounty.database import Base
from bounty.models.enums import TradeStatus, enum_column_type


class Trade(Base):
    __tablename__ = "trades"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    initiator_id = Column(String(255), nullable=False, index=True)
    recipient_id = Column(String(255), nullable=False, index=True)
    initiator_team_id = Column(String(36), ForeignKey("teams.id"), nullable=False)
    recipient_team_id = Column(String(36), ForeignKey("teams.id"), nullable=False)
    # Recorded only; settlement happens outside the engine
    cash_amount = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(
        enum_column_type(TradeStatus, "trade_status"),
        nullable=False,
        default=TradeStatus.PENDING,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    initiator_team = relationship("Team", foreign_keys=[initiator_team_id])
    recipient_team = relationship("Team", foreign_keys=[recipient_team_id])

"""Auction and bid models."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from bounty.database import Base
from bounty.models.enums import AuctionStatus, enum_column_type


class Auction(Base):
    __tablename__ = "auctions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # unique: at most one auction per team
    team_id = Column(String(36), ForeignKey("teams.id"), nullable=False, unique=True)
    status = Column(
        enum_column_type(AuctionStatus, "auction_status"),
        nullable=False,
        default=AuctionStatus.SCHEDULED,
    )
    start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    final_bid_amount = Column(Numeric(10, 2), nullable=True)
    winner_user_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    team = relationship("Team")
    bids = relationship("Bid", back_populates="auction", order_by="Bid.amount")


class Bid(Base):
    __tablename__ = "bids"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    auction_id = Column(String(36), ForeignKey("auctions.id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    auction = relationship("Auction", back_populates="bids")

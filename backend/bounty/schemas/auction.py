"""Auction and bid request/response schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from bounty.models.enums import AuctionStatus


class AuctionOpenRequest(BaseModel):
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class BidRequest(BaseModel):
    amount: Decimal


class BidResponse(BaseModel):
    id: str
    auction_id: str
    user_id: str
    amount: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


class AuctionResponse(BaseModel):
    id: str
    team_id: str
    team_name: str
    team_seed: int
    status: AuctionStatus
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    leading_bid: Decimal
    bid_count: int
    final_bid_amount: Optional[Decimal] = None
    winner_user_id: Optional[str] = None


class AuctionDetailResponse(AuctionResponse):
    bids: list[BidResponse]

"""Auctions router — listing, lifecycle, and bidding."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bounty import actions
from bounty.database import get_db
from bounty.errors import NotFoundError
from bounty.middleware.auth import get_current_user_id, require_operator
from bounty.routers.common import unwrap
from bounty.schemas.auction import (
    AuctionDetailResponse,
    AuctionOpenRequest,
    AuctionResponse,
    BidRequest,
    BidResponse,
)
from bounty.services import auction_service

router = APIRouter(prefix="/api/auctions", tags=["auctions"])


def _detail(db: Session, auction) -> AuctionDetailResponse:
    return AuctionDetailResponse(
        **auction_service.auction_summary(db, auction),
        bids=[BidResponse.model_validate(b) for b in auction.bids],
    )


@router.get("", response_model=list[AuctionResponse])
def list_auctions(
    closed_within_hours: Optional[int] = Query(default=24, ge=0),
    db: Session = Depends(get_db),
):
    """Scheduled and open auctions, plus recently closed ones."""
    closed_since = None
    if closed_within_hours:
        closed_since = datetime.now(timezone.utc) - timedelta(hours=closed_within_hours)
    return [AuctionResponse(**a) for a in auction_service.list_auctions(db, closed_since)]


@router.get("/{auction_id}", response_model=AuctionDetailResponse)
def get_auction(auction_id: str, db: Session = Depends(get_db)):
    try:
        auction = auction_service.get_auction(db, auction_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return _detail(db, auction)


@router.post("/{auction_id}/bids", response_model=BidResponse, status_code=201)
def place_bid(
    auction_id: str,
    req: BidRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    bid = unwrap(actions.place_bid(db, auction_id, user_id, req.amount))
    return BidResponse.model_validate(bid)


@router.post("/{auction_id}/open", response_model=AuctionDetailResponse)
def open_auction(
    auction_id: str,
    req: AuctionOpenRequest,
    db: Session = Depends(get_db),
    operator_id: str = Depends(require_operator),
):
    """Start accepting bids with an optional end time (operator only)."""
    auction = unwrap(actions.open_auction(db, auction_id, req.start_time, req.end_time))
    return _detail(db, auction)


@router.post("/{auction_id}/close", response_model=AuctionDetailResponse)
def close_auction(
    auction_id: str,
    db: Session = Depends(get_db),
    operator_id: str = Depends(require_operator),
):
    """Close bidding and record the winner (operator only)."""
    auction = unwrap(actions.close_auction(db, auction_id))
    return _detail(db, auction)


@router.post("/sweep", response_model=list[AuctionResponse])
def sweep_contested_teams(
    db: Session = Depends(get_db),
    operator_id: str = Depends(require_operator),
):
    """Create any auction a failed contention check left missing."""
    auctions = unwrap(actions.sweep_contested_teams(db))
    return [AuctionResponse(**auction_service.auction_summary(db, a)) for a in auctions]

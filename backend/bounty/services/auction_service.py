"""Auction service — auction lifecycle and the bid ledger.

Bid acceptance is serialised per auction: the auction row is locked
(SELECT ... FOR UPDATE) before the leading bid is read, and the lock is held
until the new bid commits. Two bids racing on the same stale leading bid
therefore queue, and the second one re-reads the first one's amount.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from bounty.errors import NotFoundError, StateConflictError, ValidationError
from bounty.models.auction import Auction, Bid
from bounty.models.enums import AuctionStatus
from bounty.models.pick import Pick
from bounty.money import CENT, parse_money

logger = logging.getLogger(__name__)

# What happens to a contested team whose auction closes without bids:
# every picker keeps their Pick and keeps scoring. No re-auction is scheduled.
NO_BID_POLICY = "keep_split"

BIDDABLE = (AuctionStatus.SCHEDULED, AuctionStatus.OPEN)


def _as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; everything is stored in UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _lock_auction(db: Session, auction_id: str) -> Auction:
    auction = db.query(Auction).filter(Auction.id == auction_id).with_for_update().first()
    if not auction:
        raise NotFoundError(f"Auction {auction_id} not found")
    return auction


def get_auction(db: Session, auction_id: str) -> Auction:
    auction = db.query(Auction).filter(Auction.id == auction_id).first()
    if not auction:
        raise NotFoundError(f"Auction {auction_id} not found")
    return auction


def current_leading_bid(db: Session, auction_id: str) -> Decimal:
    """Highest accepted bid, or zero when nobody has bid yet."""
    highest = db.query(func.max(Bid.amount)).filter(Bid.auction_id == auction_id).scalar()
    return Decimal(str(highest)).quantize(CENT) if highest is not None else Decimal("0")


def is_ended(auction: Auction, now: Optional[datetime] = None) -> bool:
    end_time = _as_utc(auction.end_time)
    return end_time is not None and (now or datetime.now(timezone.utc)) > end_time


def open_auction(
    db: Session,
    auction_id: str,
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
) -> Auction:
    """Transition scheduled -> open, recording the operator-supplied window."""
    auction = _lock_auction(db, auction_id)
    if auction.status != AuctionStatus.SCHEDULED:
        raise StateConflictError(f"Cannot open auction with status: {auction.status.value}")

    now = datetime.now(timezone.utc)
    start_time = _as_utc(start_time) or now
    end_time = _as_utc(end_time)
    if end_time is not None:
        if end_time <= start_time:
            raise ValidationError("Auction end time must be after its start time")
        if end_time <= now:
            raise ValidationError("Auction end time is already in the past")

    auction.status = AuctionStatus.OPEN
    auction.start_time = start_time
    auction.end_time = end_time
    db.commit()
    db.refresh(auction)
    logger.info("Auction %s opened (ends %s)", auction.id, end_time or "when closed")
    return auction


def place_bid(db: Session, auction_id: str, user_id: str, amount) -> Bid:
    """Accept a bid only if it beats the current leading bid.

    Steps, all inside one transaction holding the auction row lock:
    1. Lock the auction row
    2. Check status and end time
    3. Read the leading bid
    4. Insert the new bid
    """
    if not user_id:
        raise ValidationError("A user id is required")
    amount = parse_money(amount, "Bid")

    auction = _lock_auction(db, auction_id)
    if auction.status not in BIDDABLE:
        raise StateConflictError(f"Cannot place bid on auction with status: {auction.status.value}")
    if is_ended(auction):
        raise StateConflictError("Auction has already ended")

    leading = current_leading_bid(db, auction.id)
    if amount <= leading:
        raise ValidationError(f"Your bid must exceed the current highest bid of {leading}")

    bid = Bid(auction_id=auction.id, user_id=user_id, amount=amount)
    db.add(bid)
    db.commit()
    db.refresh(bid)
    logger.info("Bid %s accepted on auction %s: %s by %s", bid.id, auction_id, amount, user_id)
    return bid


def _award_team(db: Session, team_id: str, winner_user_id: str) -> int:
    """Hand every Pick on the team to the auction winner. Returns rows moved."""
    picks = (
        db.query(Pick)
        .filter(Pick.team_id == team_id, Pick.user_id != winner_user_id)
        .order_by(Pick.id)
        .with_for_update()
        .all()
    )
    for pick in picks:
        pick.user_id = winner_user_id
    return len(picks)


def close_auction(db: Session, auction_id: str) -> Auction:
    """Close an auction and hand the team to the highest bidder.

    Bids are strictly increasing, so the maximum is unique; ordering by
    acceptance time after amount keeps the choice deterministic regardless.
    The winner takes over every Pick on the team in the same transaction.
    With no bids the auction closes without a winner (see NO_BID_POLICY).
    """
    auction = _lock_auction(db, auction_id)
    if auction.status == AuctionStatus.CLOSED:
        raise StateConflictError("Auction is already closed")

    top_bid = (
        db.query(Bid)
        .filter(Bid.auction_id == auction.id)
        .order_by(Bid.amount.desc(), Bid.created_at.asc(), Bid.id.asc())
        .first()
    )

    auction.status = AuctionStatus.CLOSED
    moved = 0
    if top_bid:
        auction.final_bid_amount = top_bid.amount
        auction.winner_user_id = top_bid.user_id
        moved = _award_team(db, auction.team_id, top_bid.user_id)
    db.commit()
    db.refresh(auction)

    if top_bid:
        logger.info(
            "Auction %s closed: %s won at %s (%d pick(s) reassigned)",
            auction.id,
            auction.winner_user_id,
            auction.final_bid_amount,
            moved,
        )
    else:
        logger.info("Auction %s closed with no bids (policy: %s)", auction.id, NO_BID_POLICY)
    return auction


def auction_summary(db: Session, auction: Auction) -> dict:
    """Auction with its team and current leading bid, for listings."""
    bid_count = db.query(func.count(Bid.id)).filter(Bid.auction_id == auction.id).scalar()
    return {
        "id": auction.id,
        "team_id": auction.team_id,
        "team_name": auction.team.name,
        "team_seed": auction.team.seed,
        "status": auction.status,
        "start_time": _as_utc(auction.start_time),
        "end_time": _as_utc(auction.end_time),
        "leading_bid": current_leading_bid(db, auction.id),
        "bid_count": bid_count,
        "final_bid_amount": auction.final_bid_amount,
        "winner_user_id": auction.winner_user_id,
    }


def list_auctions(db: Session, closed_since: Optional[datetime] = None) -> list[dict]:
    """Scheduled and open auctions, plus those closed after `closed_since`."""
    query = db.query(Auction)
    if closed_since is None:
        query = query.filter(Auction.status.in_(BIDDABLE))
    else:
        cutoff = _as_utc(closed_since)
        query = query.filter(
            Auction.status.in_(BIDDABLE)
            | ((Auction.status == AuctionStatus.CLOSED) & (Auction.updated_at > cutoff))
        )
    auctions = query.order_by(Auction.updated_at.desc()).all()
    return [auction_summary(db, a) for a in auctions]

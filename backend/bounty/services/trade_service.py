"""Trade service — offers to swap team ownership between two users.

Ownership is checked when the offer is made and checked again, under row
locks, in the same transaction that swaps the two Pick rows. An offer that
went stale in between (the team was traded away) fails with ConcurrencyError
and stays pending.
"""

import logging
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from bounty.errors import ConcurrencyError, NotFoundError, StateConflictError, ValidationError
from bounty.models.enums import TradeStatus
from bounty.models.pick import Pick
from bounty.models.trade import Trade
from bounty.money import parse_money

logger = logging.getLogger(__name__)


def _held_pick(db: Session, user_id: str, team_id: str) -> Optional[Pick]:
    return (
        db.query(Pick)
        .filter(Pick.user_id == user_id, Pick.team_id == team_id)
        .order_by(Pick.id)
        .first()
    )


def _lock_trade(db: Session, trade_id: str) -> Trade:
    trade = db.query(Trade).filter(Trade.id == trade_id).with_for_update().first()
    if not trade:
        raise NotFoundError(f"Trade {trade_id} not found")
    return trade


def get_trade(db: Session, trade_id: str) -> Trade:
    trade = db.query(Trade).filter(Trade.id == trade_id).first()
    if not trade:
        raise NotFoundError(f"Trade {trade_id} not found")
    return trade


def create_offer(
    db: Session,
    initiator_id: str,
    recipient_id: str,
    initiator_team_id: str,
    recipient_team_id: str,
    cash_amount=0,
) -> Trade:
    """Record a pending offer. Nothing moves until the recipient accepts."""
    if not initiator_id or not recipient_id:
        raise ValidationError("Both initiator and recipient are required")
    if initiator_id == recipient_id:
        raise ValidationError("You cannot trade with yourself")
    if initiator_team_id == recipient_team_id:
        raise ValidationError("A trade must swap two different teams")
    cash = parse_money(cash_amount, "Cash amount", allow_zero=True)

    if not _held_pick(db, initiator_id, initiator_team_id):
        raise ValidationError("Initiator does not own specified team")
    if not _held_pick(db, recipient_id, recipient_team_id):
        raise ValidationError("Recipient does not own specified team")

    trade = Trade(
        initiator_id=initiator_id,
        recipient_id=recipient_id,
        initiator_team_id=initiator_team_id,
        recipient_team_id=recipient_team_id,
        cash_amount=cash,
        status=TradeStatus.PENDING,
    )
    db.add(trade)
    db.commit()
    db.refresh(trade)
    logger.info(
        "Trade %s offered: %s gives %s to %s for %s (+%s cash)",
        trade.id, initiator_id, initiator_team_id, recipient_id, recipient_team_id, cash,
    )
    return trade


def _accept(db: Session, trade: Trade) -> None:
    # Lock both sides in one statement, in primary-key order
    candidates = (
        db.query(Pick)
        .filter(
            or_(
                and_(Pick.user_id == trade.initiator_id, Pick.team_id == trade.initiator_team_id),
                and_(Pick.user_id == trade.recipient_id, Pick.team_id == trade.recipient_team_id),
            )
        )
        .order_by(Pick.id)
        .with_for_update()
        .all()
    )
    given = next(
        (p for p in candidates if p.user_id == trade.initiator_id and p.team_id == trade.initiator_team_id),
        None,
    )
    taken = next(
        (p for p in candidates if p.user_id == trade.recipient_id and p.team_id == trade.recipient_team_id),
        None,
    )
    if given is None:
        raise ConcurrencyError("Initiator no longer owns the offered team")
    if taken is None:
        raise ConcurrencyError("Recipient no longer owns the requested team")

    given.user_id = trade.recipient_id
    taken.user_id = trade.initiator_id
    trade.status = TradeStatus.ACCEPTED


def respond_to_offer(
    db: Session,
    trade_id: str,
    accept: bool,
    responder_id: Optional[str] = None,
) -> Trade:
    """Accept (swap the two picks) or reject a pending offer.

    When responder_id is given it must be the trade's recipient.
    """
    trade = _lock_trade(db, trade_id)
    if responder_id is not None and responder_id != trade.recipient_id:
        raise ValidationError("Only the recipient can respond to this trade")
    if trade.status != TradeStatus.PENDING:
        raise StateConflictError(f"Cannot respond to trade with status {trade.status.value}")

    if accept:
        _accept(db, trade)
    else:
        trade.status = TradeStatus.REJECTED
    db.commit()
    db.refresh(trade)
    logger.info("Trade %s %s", trade.id, trade.status.value)
    return trade


def cancel_offer(db: Session, trade_id: str, user_id: str) -> Trade:
    """Withdraw a pending offer; only its initiator may do so."""
    trade = _lock_trade(db, trade_id)
    if user_id != trade.initiator_id:
        raise ValidationError("Only the initiator can cancel this trade")
    if trade.status != TradeStatus.PENDING:
        raise StateConflictError(f"Cannot cancel trade with status {trade.status.value}")

    trade.status = TradeStatus.CANCELED
    db.commit()
    db.refresh(trade)
    logger.info("Trade %s canceled", trade.id)
    return trade


def list_user_trades(
    db: Session,
    user_id: str,
    status: Optional[TradeStatus] = None,
    limit: int = 50,
) -> list[Trade]:
    """Trades the user started or received, newest first."""
    query = db.query(Trade).filter(
        or_(Trade.initiator_id == user_id, Trade.recipient_id == user_id)
    )
    if status is not None:
        query = query.filter(Trade.status == status)
    return query.order_by(Trade.created_at.desc()).limit(limit).all()

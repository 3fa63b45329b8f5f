"""Trades router — offers, responses, and history."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bounty import actions
from bounty.database import get_db
from bounty.middleware.auth import get_current_user_id
from bounty.models.enums import TradeStatus
from bounty.routers.common import unwrap
from bounty.schemas.trade import TradeOfferRequest, TradeRespondRequest, TradeResponse
from bounty.services import trade_service

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.post("", response_model=TradeResponse, status_code=201)
def create_offer(
    req: TradeOfferRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Offer one of the caller's teams for one of the recipient's."""
    trade = unwrap(actions.create_trade_offer(
        db, user_id, req.recipient_id, req.initiator_team_id, req.recipient_team_id, req.cash_amount
    ))
    return TradeResponse.model_validate(trade)


@router.post("/{trade_id}/respond", response_model=TradeResponse)
def respond(
    trade_id: str,
    req: TradeRespondRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    trade = unwrap(actions.respond_to_trade_offer(db, trade_id, req.accept, responder_id=user_id))
    return TradeResponse.model_validate(trade)


@router.post("/{trade_id}/cancel", response_model=TradeResponse)
def cancel(
    trade_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    trade = unwrap(actions.cancel_trade_offer(db, trade_id, user_id))
    return TradeResponse.model_validate(trade)


@router.get("/my", response_model=list[TradeResponse])
def my_trades(
    status: Optional[TradeStatus] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Trades the caller started or received."""
    return [TradeResponse.model_validate(t) for t in trade_service.list_user_trades(db, user_id, status)]

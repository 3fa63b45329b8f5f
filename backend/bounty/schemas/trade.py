"""Trade request/response schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from bounty.models.enums import TradeStatus


class TradeOfferRequest(BaseModel):
    recipient_id: str
    initiator_team_id: str  # team the initiator gives up
    recipient_team_id: str  # team the initiator asks for
    cash_amount: Decimal = Decimal("0")


class TradeRespondRequest(BaseModel):
    accept: bool


class TradeResponse(BaseModel):
    id: str
    initiator_id: str
    recipient_id: str
    initiator_team_id: str
    recipient_team_id: str
    cash_amount: Decimal
    status: TradeStatus
    created_at: datetime

    class Config:
        from_attributes = True

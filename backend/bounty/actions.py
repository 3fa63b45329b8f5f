"""Game actions — the operation surface callers use.

Each action runs one service call as one atomic unit and reports the outcome
as a Result. Typed game errors become failed Results carrying their kind;
unexpected database errors are logged and reported generically. Nothing is
raised past this module.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bounty.errors import GameError
from bounty.services import auction_service, pick_service, score_service, trade_service

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal"


class Result(BaseModel):
    is_success: bool
    message: str
    data: Any = None
    error: Optional[str] = None  # validation | state_conflict | not_found | concurrency | internal

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "Result":
        return cls(is_success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: str) -> "Result":
        return cls(is_success=False, message=message, error=error)


def _run(db: Session, action: str, call: Callable[[], Any], message: Callable[[Any], str]) -> Result:
    try:
        data = call()
    except GameError as e:
        db.rollback()
        logger.info("[%s] rejected (%s): %s", action, e.kind, e.message)
        return Result.fail(e.message, e.kind)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("[%s] database error", action)
        return Result.fail(f"Failed to {action.replace('_', ' ')}", INTERNAL_ERROR)
    return Result.ok(message(data), data)


def submit_picks(db: Session, user_id: str, team_ids: list[str]) -> Result:
    return _run(
        db,
        "submit_picks",
        lambda: pick_service.submit_picks(db, user_id, team_ids),
        lambda _: "Picks created successfully",
    )


def open_auction(
    db: Session,
    auction_id: str,
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
) -> Result:
    return _run(
        db,
        "open_auction",
        lambda: auction_service.open_auction(db, auction_id, start_time, end_time),
        lambda _: "Auction opened",
    )


def place_bid(db: Session, auction_id: str, user_id: str, amount) -> Result:
    return _run(
        db,
        "place_bid",
        lambda: auction_service.place_bid(db, auction_id, user_id, amount),
        lambda _: "Bid placed",
    )


def close_auction(db: Session, auction_id: str) -> Result:
    return _run(
        db,
        "close_auction",
        lambda: auction_service.close_auction(db, auction_id),
        lambda a: "Auction closed" if a.winner_user_id else "Auction closed with no bids",
    )


def create_trade_offer(
    db: Session,
    initiator_id: str,
    recipient_id: str,
    initiator_team_id: str,
    recipient_team_id: str,
    cash_amount=0,
) -> Result:
    return _run(
        db,
        "create_trade_offer",
        lambda: trade_service.create_offer(
            db, initiator_id, recipient_id, initiator_team_id, recipient_team_id, cash_amount
        ),
        lambda _: "Trade offer created",
    )


def respond_to_trade_offer(
    db: Session,
    trade_id: str,
    accept: bool,
    responder_id: Optional[str] = None,
) -> Result:
    return _run(
        db,
        "respond_to_trade_offer",
        lambda: trade_service.respond_to_offer(db, trade_id, accept, responder_id),
        lambda _: "Trade accepted" if accept else "Trade rejected",
    )


def cancel_trade_offer(db: Session, trade_id: str, user_id: str) -> Result:
    return _run(
        db,
        "cancel_trade_offer",
        lambda: trade_service.cancel_offer(db, trade_id, user_id),
        lambda _: "Trade canceled",
    )


def apply_round_result(db: Session, team_id: str, round_name: str) -> Result:
    return _run(
        db,
        "apply_round_result",
        lambda: score_service.apply_round_result(db, team_id, round_name),
        lambda r: f"Scores updated (+{r['points']}) for round={r['round']}",
    )


def sweep_contested_teams(db: Session) -> Result:
    return _run(
        db,
        "sweep_contested_teams",
        lambda: pick_service.sweep_contested_teams(db),
        lambda created: f"{len(created)} contested team(s) checked",
    )

"""SQLAlchemy ORM models."""

from bounty.models.enums import TeamCategory, AuctionStatus, TradeStatus
from bounty.models.team import Team
from bounty.models.pick import Entry, Pick
from bounty.models.auction import Auction, Bid
from bounty.models.trade import Trade
from bounty.models.score import Score, ScoredResult

__all__ = [
    "TeamCategory",
    "AuctionStatus",
    "TradeStatus",
    "Team",
    "Entry",
    "Pick",
    "Auction",
    "Bid",
    "Trade",
    "Score",
    "ScoredResult",
]

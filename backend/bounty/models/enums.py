"""Closed state sets for categories and lifecycle statuses."""

import enum

from sqlalchemy import Enum


class TeamCategory(str, enum.Enum):
    FAVORITE = "favorite"
    UPSET = "upset"


class AuctionStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    OPEN = "open"
    CLOSED = "closed"


class TradeStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELED = "canceled"


def enum_column_type(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Column type storing the enum's values (not its member names)."""
    return Enum(enum_cls, name=name, values_callable=lambda e: [m.value for m in e])

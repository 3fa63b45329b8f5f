"""Tests for the auction lifecycle and the bid ledger."""

import threading
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from bounty import actions
from bounty.errors import NotFoundError, StateConflictError, ValidationError
from bounty.models.auction import Auction, Bid
from bounty.models.enums import AuctionStatus
from bounty.models.pick import Pick
from bounty.services import auction_service, pick_service, score_service

from conftest import pick_set


@pytest.fixture
def auction_id(session_factory, catalog):
    """A scheduled auction for the seed-9 team."""
    new_id = str(uuid.uuid4())
    session = session_factory()
    session.add(Auction(id=new_id, team_id=catalog[9]))
    session.commit()
    session.close()
    return new_id


def _accepted_amounts(db, auction_id):
    bids = db.query(Bid).filter(Bid.auction_id == auction_id).order_by(Bid.created_at, Bid.amount).all()
    return [b.amount for b in bids]


class TestPlaceBid:
    def test_first_bid_beats_zero_floor(self, db, auction_id):
        bid = auction_service.place_bid(db, auction_id, "alice", 1)
        assert bid.amount == Decimal("1.00")
        assert auction_service.current_leading_bid(db, auction_id) == Decimal("1.00")

    def test_no_bids_leading_is_zero(self, db, auction_id):
        assert auction_service.current_leading_bid(db, auction_id) == Decimal("0")

    def test_higher_bid_accepted(self, db, auction_id):
        auction_service.place_bid(db, auction_id, "alice", 100)
        auction_service.place_bid(db, auction_id, "bob", "100.01")
        assert auction_service.current_leading_bid(db, auction_id) == Decimal("100.01")

    def test_equal_bid_rejected(self, db, auction_id):
        auction_service.place_bid(db, auction_id, "alice", 100)
        with pytest.raises(ValidationError, match="exceed"):
            auction_service.place_bid(db, auction_id, "bob", 100)

    def test_lower_bid_rejected(self, db, auction_id):
        auction_service.place_bid(db, auction_id, "alice", 100)
        with pytest.raises(ValidationError):
            auction_service.place_bid(db, auction_id, "bob", "99.99")
        db.rollback()
        assert _accepted_amounts(db, auction_id) == [Decimal("100.00")]

    @pytest.mark.parametrize("amount", [0, -5, "1.005", "abc", None, True, "NaN", "1e12"])
    def test_malformed_amount_rejected(self, db, auction_id, amount):
        with pytest.raises(ValidationError):
            auction_service.place_bid(db, auction_id, "alice", amount)

    def test_unknown_auction(self, db, catalog):
        with pytest.raises(NotFoundError):
            auction_service.place_bid(db, "missing", "alice", 10)

    def test_bid_on_closed_auction(self, db, auction_id):
        auction_service.close_auction(db, auction_id)
        with pytest.raises(StateConflictError):
            auction_service.place_bid(db, auction_id, "alice", 10)

    def test_bid_after_end_time(self, db, auction_id):
        auction = db.query(Auction).filter(Auction.id == auction_id).one()
        auction.status = AuctionStatus.OPEN
        auction.end_time = datetime.now(timezone.utc) - timedelta(minutes=1)
        db.commit()
        with pytest.raises(StateConflictError, match="ended"):
            auction_service.place_bid(db, auction_id, "alice", 10)

    def test_scheduled_and_open_both_accept_bids(self, db, auction_id):
        auction_service.place_bid(db, auction_id, "alice", 10)
        auction_service.open_auction(db, auction_id)
        auction_service.place_bid(db, auction_id, "bob", 20)
        assert _accepted_amounts(db, auction_id) == [Decimal("10.00"), Decimal("20.00")]


class TestConcurrentBids:
    def _race(self, session_factory, auction_id, bids):
        barrier = threading.Barrier(len(bids))
        results = [None] * len(bids)

        def submit(i, user_id, amount):
            session = session_factory()
            try:
                barrier.wait()
                results[i] = actions.place_bid(session, auction_id, user_id, amount)
            finally:
                session.close()

        threads = [
            threading.Thread(target=submit, args=(i, user_id, amount))
            for i, (user_id, amount) in enumerate(bids)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return results

    def test_same_amount_only_one_wins(self, session_factory, auction_id):
        results = self._race(session_factory, auction_id, [(f"user{i}", 100) for i in range(6)])
        accepted = [r for r in results if r.is_success]
        rejected = [r for r in results if not r.is_success]
        assert len(accepted) == 1
        assert all(r.error == "validation" for r in rejected)

        check = session_factory()
        assert _accepted_amounts(check, auction_id) == [Decimal("100.00")]
        check.close()

    def test_accepted_sequence_strictly_increasing(self, session_factory, auction_id):
        bids = [(f"user{i}", amount) for i, amount in enumerate([50, 10, 40, 20, 30, 45, 15, 35])]
        self._race(session_factory, auction_id, bids)

        check = session_factory()
        amounts = _accepted_amounts(check, auction_id)
        check.close()
        assert amounts
        assert all(a < b for a, b in zip(amounts, amounts[1:]))


class TestOpenAuction:
    def test_open_scheduled(self, db, auction_id):
        end = datetime.now(timezone.utc) + timedelta(hours=2)
        auction = auction_service.open_auction(db, auction_id, end_time=end)
        assert auction.status == AuctionStatus.OPEN
        assert auction.start_time is not None
        assert auction_service.is_ended(auction) is False

    def test_offset_end_time_stored_as_utc(self, db, auction_id):
        eastern = timezone(timedelta(hours=-4))
        end = datetime.now(eastern) + timedelta(hours=1)
        auction_service.open_auction(db, auction_id, end_time=end)

        db.expire_all()
        stored = auction_service.get_auction(db, auction_id)
        assert auction_service._as_utc(stored.end_time) == end.astimezone(timezone.utc)
        assert auction_service.is_ended(stored) is False
        assert auction_service.place_bid(db, auction_id, "alice", 10).amount == Decimal("10.00")

    def test_timestamp_columns_keep_timezone(self):
        from sqlalchemy import DateTime

        from bounty.database import Base

        columns = [
            c for table in Base.metadata.tables.values() for c in table.columns if isinstance(c.type, DateTime)
        ]
        assert columns
        assert [c for c in columns if not c.type.timezone] == []

    def test_open_twice_conflicts(self, db, auction_id):
        auction_service.open_auction(db, auction_id)
        with pytest.raises(StateConflictError):
            auction_service.open_auction(db, auction_id)

    def test_end_before_start_rejected(self, db, auction_id):
        start = datetime.now(timezone.utc) + timedelta(hours=2)
        with pytest.raises(ValidationError):
            auction_service.open_auction(db, auction_id, start_time=start, end_time=start - timedelta(hours=1))

    def test_end_in_past_rejected(self, db, auction_id):
        start = datetime.now(timezone.utc) - timedelta(hours=2)
        with pytest.raises(ValidationError):
            auction_service.open_auction(
                db, auction_id, start_time=start, end_time=start + timedelta(hours=1)
            )

    def test_cannot_reopen_closed(self, db, auction_id):
        auction_service.close_auction(db, auction_id)
        with pytest.raises(StateConflictError):
            auction_service.open_auction(db, auction_id)

    def test_open_unknown(self, db, catalog):
        with pytest.raises(NotFoundError):
            auction_service.open_auction(db, "missing")


class TestCloseAuction:
    def test_highest_bidder_wins(self, db, auction_id):
        auction_service.place_bid(db, auction_id, "A", 100)
        auction_service.place_bid(db, auction_id, "C", 120)
        auction_service.place_bid(db, auction_id, "B", 150)
        auction = auction_service.close_auction(db, auction_id)
        assert auction.status == AuctionStatus.CLOSED
        assert auction.winner_user_id == "B"
        assert auction.final_bid_amount == Decimal("150.00")

    def test_winner_is_max_regardless_of_insert_order(self, db, auction_id):
        for user_id, amount in (("A", 100), ("B", 150), ("C", 120)):
            db.add(Bid(auction_id=auction_id, user_id=user_id, amount=Decimal(amount)))
        db.commit()
        auction = auction_service.close_auction(db, auction_id)
        assert auction.winner_user_id == "B"
        assert auction.final_bid_amount == Decimal("150.00")

    def test_no_bids_closes_without_winner(self, db, auction_id):
        auction = auction_service.close_auction(db, auction_id)
        assert auction.status == AuctionStatus.CLOSED
        assert auction.winner_user_id is None
        assert auction.final_bid_amount is None

    def _contested_seed9(self, db, catalog):
        pick_service.submit_picks(db, "alice", pick_set(catalog))
        pick_service.submit_picks(db, "bob", pick_set(catalog, favorite=2, upsets=(9, 12, 13)))
        return db.query(Auction).filter(Auction.team_id == catalog[9]).one().id

    def _holders(self, db, team_id):
        return sorted({p.user_id for p in db.query(Pick).filter(Pick.team_id == team_id)})

    def test_winner_takes_every_pick_on_the_team(self, db, catalog):
        auction_id = self._contested_seed9(db, catalog)
        auction_service.place_bid(db, auction_id, "alice", 100)
        auction_service.place_bid(db, auction_id, "bob", 150)
        auction_service.close_auction(db, auction_id)

        assert self._holders(db, catalog[9]) == ["bob"]
        assert [p.team.seed for p in pick_service.get_user_picks(db, "alice")] == [1, 10, 11]

        result = score_service.apply_round_result(db, catalog[9], "first round")
        assert result["awarded_user_ids"] == ["bob"]
        assert score_service.get_score(db, "alice") == 0
        assert score_service.get_score(db, "bob") == 9

    def test_winner_without_pick_takes_the_team(self, db, catalog):
        auction_id = self._contested_seed9(db, catalog)
        auction_service.place_bid(db, auction_id, "carol", 80)
        auction_service.close_auction(db, auction_id)
        assert self._holders(db, catalog[9]) == ["carol"]

    def test_no_bid_close_keeps_split(self, db, catalog):
        auction_id = self._contested_seed9(db, catalog)
        auction_service.close_auction(db, auction_id)
        assert self._holders(db, catalog[9]) == ["alice", "bob"]

        result = score_service.apply_round_result(db, catalog[9], "first round")
        assert result["awarded_user_ids"] == ["alice", "bob"]

    def test_close_is_irreversible(self, db, auction_id):
        auction_service.close_auction(db, auction_id)
        with pytest.raises(StateConflictError):
            auction_service.close_auction(db, auction_id)

    def test_close_unknown(self, db, catalog):
        with pytest.raises(NotFoundError):
            auction_service.close_auction(db, "missing")


class TestListAuctions:
    def test_lists_biddable_with_leading_bid(self, db, auction_id):
        auction_service.place_bid(db, auction_id, "alice", 25)
        rows = auction_service.list_auctions(db)
        assert len(rows) == 1
        assert rows[0]["team_seed"] == 9
        assert rows[0]["leading_bid"] == Decimal("25.00")
        assert rows[0]["bid_count"] == 1

    def test_closed_hidden_unless_recent(self, db, auction_id):
        auction_service.close_auction(db, auction_id)
        assert auction_service.list_auctions(db) == []
        recent = auction_service.list_auctions(db, datetime.now(timezone.utc) - timedelta(hours=1))
        assert [r["id"] for r in recent] == [auction_id]

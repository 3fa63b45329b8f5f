"""Pick service — one-shot pick commitment and contested-team detection."""

import logging
import uuid
from collections import Counter
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bounty.database import insert_ignore
from bounty.errors import StateConflictError, ValidationError
from bounty.models.auction import Auction
from bounty.models.enums import AuctionStatus, TeamCategory
from bounty.models.pick import Entry, Pick
from bounty.models.team import Team

logger = logging.getLogger(__name__)

PICKS_PER_USER = 4
REQUIRED_MIX = {TeamCategory.UPSET: 3, TeamCategory.FAVORITE: 1}
DETECTION_ATTEMPTS = 2


def _validate_team_ids(team_ids) -> list[str]:
    if team_ids is None or isinstance(team_ids, (str, bytes)):
        raise ValidationError("Team selection must be a list of team ids")
    team_ids = list(team_ids)
    if len(team_ids) != PICKS_PER_USER:
        raise ValidationError(
            "You must select exactly 4 teams: 3 upset candidates (seeds 9-16) "
            "and 1 favorite (seeds 1-4)"
        )
    dupes = [tid for tid, n in Counter(team_ids).items() if n > 1]
    if dupes:
        raise ValidationError(f"Duplicate team selection: {', '.join(map(str, dupes))}")
    return team_ids


def _resolve_teams(db: Session, team_ids: list[str]) -> list[Team]:
    teams = db.query(Team).filter(Team.id.in_(team_ids)).all()
    found = {t.id for t in teams}
    missing = [tid for tid in team_ids if tid not in found]
    if missing:
        raise ValidationError(f"Unknown team(s): {', '.join(map(str, missing))}")

    counts = Counter()
    for team in teams:
        if team.category is None:
            raise ValidationError(
                f"Team {team.name} (seed {team.seed}) is neither an upset candidate nor a favorite"
            )
        counts[team.category] += 1
    if counts != Counter(REQUIRED_MIX):
        raise ValidationError("Invalid distribution: exactly 3 upset candidates + 1 favorite required")

    by_id = {t.id: t for t in teams}
    return [by_id[tid] for tid in team_ids]


def commit_picks(db: Session, user_id: str, team_ids) -> list[Pick]:
    """Validate and persist a user's complete pick set in one transaction.

    The entries row is the exactly-once guard: a concurrent second
    submission for the same user collides on its primary key.
    """
    if not user_id:
        raise ValidationError("A user id is required")
    team_ids = _validate_team_ids(team_ids)
    teams = _resolve_teams(db, team_ids)

    if db.query(Entry).filter(Entry.user_id == user_id).first():
        raise StateConflictError("You have already made your picks. You cannot pick again.")

    db.add(Entry(user_id=user_id))
    picks = [
        Pick(id=str(uuid.uuid4()), user_id=user_id, team_id=team.id, category=team.category)
        for team in teams
    ]
    db.add_all(picks)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise StateConflictError("You have already made your picks. You cannot pick again.")

    logger.info("User %s committed picks %s", user_id, team_ids)
    return picks


def detect_contested_team(db: Session, team_id: str) -> Optional[Auction]:
    """Open an auction for a team once two or more picks reference it.

    Safe to run concurrently for the same team: the insert is conflict-ignoring
    against the unique team_id on auctions, so exactly one row survives.
    Returns the team's auction, or None while the team is uncontested.
    """
    pick_count = db.query(func.count(Pick.id)).filter(Pick.team_id == team_id).scalar()
    if pick_count < 2:
        db.commit()
        return None

    created = insert_ignore(
        db,
        Auction,
        {"id": str(uuid.uuid4()), "team_id": team_id, "status": AuctionStatus.SCHEDULED},
        ["team_id"],
    )
    db.commit()
    auction = db.query(Auction).filter(Auction.team_id == team_id).one()
    if created:
        logger.info("Team %s contested by %d picks; auction %s created", team_id, pick_count, auction.id)
    return auction


def submit_picks(db: Session, user_id: str, team_ids) -> list[Pick]:
    """Commit a pick set, then check each of its teams for contention.

    Detection runs after the commit, each team in its own transaction, so that
    two users committing the same team concurrently cannot both miss the other.
    A check that fails twice leaves the picks committed;
    sweep_contested_teams repairs it.
    """
    picks = commit_picks(db, user_id, team_ids)
    for team_id in sorted({p.team_id for p in picks}):
        for attempt in range(1, DETECTION_ATTEMPTS + 1):
            try:
                detect_contested_team(db, team_id)
                break
            except SQLAlchemyError:
                db.rollback()
                if attempt == DETECTION_ATTEMPTS:
                    logger.exception("Contested-team check failed for team %s; left for sweep", team_id)
                else:
                    logger.warning("Contested-team check failed for team %s; retrying", team_id)
    return picks


def sweep_contested_teams(db: Session) -> list[Auction]:
    """Create any auction missing for a team with two or more picks."""
    contested = (
        db.query(Pick.team_id)
        .outerjoin(Auction, Auction.team_id == Pick.team_id)
        .filter(Auction.id.is_(None))
        .group_by(Pick.team_id)
        .having(func.count(Pick.id) > 1)
        .all()
    )
    db.commit()
    return [detect_contested_team(db, team_id) for (team_id,) in contested]


def get_user_picks(db: Session, user_id: str) -> list[Pick]:
    """Picks currently owned by a user, strongest seed first."""
    return (
        db.query(Pick)
        .join(Team, Pick.team_id == Team.id)
        .filter(Pick.user_id == user_id)
        .order_by(Team.seed.asc(), Team.name.asc())
        .all()
    )

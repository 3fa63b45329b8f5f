"""Score service — round-based point awards and the scoreboard.

Points for a win = base x round multiplier, where the base is a flat 5 for a
favorite and the seed itself for an upset candidate (bigger upsets pay more).
Every (team, round) can be applied once; the scored_results ledger turns a
retried call into a StateConflictError instead of double-counting.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from bounty.database import insert_ignore
from bounty.errors import StateConflictError, ValidationError
from bounty.models.enums import TeamCategory
from bounty.models.pick import Pick
from bounty.models.score import Score, ScoredResult
from bounty.models.team import Team
from bounty.services.team_service import get_team

logger = logging.getLogger(__name__)

FAVORITE_BASE_POINTS = 5

ROUND_MULTIPLIERS = {
    "sweet 16": 2,
    "elite 8": 3,
    "final 4": 4,
    "championship": 5,
}

ROUND_ALIASES = {
    "sweet sixteen": "sweet 16",
    "elite eight": "elite 8",
    "final four": "final 4",
}


def normalize_round(round_name: str) -> str:
    """Case/whitespace-insensitive round key, with spelled-out aliases folded in."""
    key = " ".join(str(round_name or "").split()).lower()
    if not key:
        raise ValidationError("A round name is required")
    return ROUND_ALIASES.get(key, key)


def round_multiplier(round_name: str) -> int:
    return ROUND_MULTIPLIERS.get(normalize_round(round_name), 1)


def base_points(team: Team) -> int:
    if team.category == TeamCategory.FAVORITE:
        return FAVORITE_BASE_POINTS
    return team.seed


def points_for(team: Team, round_name: str) -> int:
    return base_points(team) * round_multiplier(round_name)


def apply_round_result(db: Session, team_id: str, round_name: str) -> dict:
    """Credit every current holder of the winning team.

    The ledger row, the score rows and the increments commit together.
    """
    round_key = normalize_round(round_name)
    team = get_team(db, team_id)
    points = points_for(team, round_key)

    recorded = insert_ignore(
        db,
        ScoredResult,
        {"id": str(uuid.uuid4()), "team_id": team.id, "round": round_key, "points": points, "holders": 0},
        ["team_id", "round"],
    )
    if not recorded:
        team_name = team.name
        db.rollback()
        raise StateConflictError(f"Result for {team_name} in round '{round_key}' was already applied")

    holders = sorted({uid for (uid,) in db.query(Pick.user_id).filter(Pick.team_id == team.id).all()})
    for user_id in holders:
        insert_ignore(db, Score, {"user_id": user_id, "current_score": 0}, ["user_id"])
        db.query(Score).filter(Score.user_id == user_id).update(
            {Score.current_score: Score.current_score + points},
            synchronize_session=False,
        )
    db.query(ScoredResult).filter(
        ScoredResult.team_id == team.id, ScoredResult.round == round_key
    ).update({ScoredResult.holders: len(holders)}, synchronize_session=False)
    db.commit()

    logger.info(
        "Round '%s' win for %s: +%d to %d holder(s)", round_key, team.name, points, len(holders)
    )
    return {
        "team_id": team.id,
        "round": round_key,
        "points": points,
        "awarded_user_ids": holders,
    }


def get_score(db: Session, user_id: str) -> int:
    score = db.query(Score).filter(Score.user_id == user_id).first()
    return score.current_score if score else 0


def get_scoreboard(db: Session, limit: Optional[int] = None) -> list[dict]:
    """Scores high to low; tied users share a rank (1, 2, 2, 4)."""
    query = db.query(Score).order_by(Score.current_score.desc(), Score.user_id.asc())
    if limit is not None:
        query = query.limit(limit)

    rows = []
    for position, score in enumerate(query.all(), start=1):
        if rows and rows[-1]["score"] == score.current_score:
            rank = rows[-1]["rank"]
        else:
            rank = position
        rows.append({"rank": rank, "user_id": score.user_id, "score": score.current_score})
    return rows

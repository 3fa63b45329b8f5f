"""Scores router — posting results and the scoreboard."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bounty import actions
from bounty.database import get_db
from bounty.middleware.auth import get_current_user_id, require_operator
from bounty.routers.common import unwrap
from bounty.schemas.score import RoundResultRequest, RoundResultResponse, ScoreboardRow
from bounty.services import score_service

router = APIRouter(prefix="/api", tags=["scores"])


@router.post("/results", response_model=RoundResultResponse, status_code=201)
def post_result(
    req: RoundResultRequest,
    db: Session = Depends(get_db),
    operator_id: str = Depends(require_operator),
):
    """Award points for a team's win in a round (operator only)."""
    return RoundResultResponse(**unwrap(actions.apply_round_result(db, req.team_id, req.round)))


@router.get("/scoreboard", response_model=list[ScoreboardRow])
def scoreboard(limit: int = Query(default=100, ge=1, le=1000), db: Session = Depends(get_db)):
    return [ScoreboardRow(**row) for row in score_service.get_scoreboard(db, limit)]


@router.get("/scores/my")
def my_score(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return {"user_id": user_id, "score": score_service.get_score(db, user_id)}

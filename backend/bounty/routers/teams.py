"""Teams router — catalog and pick submission."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from bounty import actions
from bounty.database import get_db
from bounty.errors import NotFoundError
from bounty.middleware.auth import get_current_user_id
from bounty.models.enums import TeamCategory
from bounty.routers.common import unwrap
from bounty.schemas.team import PickResponse, PickSubmitRequest, TeamResponse
from bounty.services import pick_service, team_service

router = APIRouter(prefix="/api", tags=["teams"])


def _pick_to_response(pick) -> PickResponse:
    return PickResponse(
        id=pick.id,
        team_id=pick.team_id,
        team_name=pick.team.name,
        team_seed=pick.team.seed,
        category=pick.category,
    )


@router.get("/teams", response_model=list[TeamResponse])
def list_teams(category: Optional[TeamCategory] = None, db: Session = Depends(get_db)):
    """List the catalog, optionally only favorites or upset candidates."""
    return [TeamResponse.model_validate(t) for t in team_service.list_teams(db, category)]


@router.get("/teams/{team_id}", response_model=TeamResponse)
def get_team(team_id: str, db: Session = Depends(get_db)):
    try:
        return TeamResponse.model_validate(team_service.get_team(db, team_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/picks", response_model=list[PickResponse], status_code=201)
def submit_picks(
    req: PickSubmitRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Commit the caller's one-time pick set."""
    unwrap(actions.submit_picks(db, user_id, req.team_ids))
    return [_pick_to_response(p) for p in pick_service.get_user_picks(db, user_id)]


@router.get("/picks/my", response_model=list[PickResponse])
def my_picks(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Teams the caller currently owns."""
    return [_pick_to_response(p) for p in pick_service.get_user_picks(db, user_id)]

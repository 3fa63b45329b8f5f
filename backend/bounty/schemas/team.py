"""Team and pick response schemas."""

from typing import Optional

from pydantic import BaseModel

from bounty.models.enums import TeamCategory


class TeamResponse(BaseModel):
    id: str
    name: str
    seed: int
    category: Optional[TeamCategory] = None

    class Config:
        from_attributes = True


class PickSubmitRequest(BaseModel):
    team_ids: list[str]  # 3 upset candidates + 1 favorite


class PickResponse(BaseModel):
    id: str
    team_id: str
    team_name: str
    team_seed: int
    category: TeamCategory

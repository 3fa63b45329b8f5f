"""Scoring request/response schemas."""

from pydantic import BaseModel


class RoundResultRequest(BaseModel):
    team_id: str
    round: str  # e.g. "first round", "sweet 16", "final four", "championship"


class RoundResultResponse(BaseModel):
    team_id: str
    round: str
    points: int
    awarded_user_ids: list[str]


class ScoreboardRow(BaseModel):
    rank: int
    user_id: str
    score: int

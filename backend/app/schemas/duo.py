"""Duo-related Pydantic schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from app.core.progression import TreeStage


class DuoCreate(BaseModel):
    member_a_id: str = Field(min_length=1, max_length=100)
    member_b_id: str = Field(min_length=1, max_length=100)


class DuoState(BaseModel):
    id: int
    member_a_id: str
    member_b_id: str
    trust_score: int
    streak: int
    streak_credited_date: date | None
    streak_credited_week: date | None = None
    tree_stage: TreeStage
    level: int = 0
    created_at: datetime
    last_updated: datetime | None

    model_config = {"from_attributes": True}


class StreakInfoResponse(BaseModel):
    current_streak: int
    streak_credited_date: date | None
    member_a_completed_today: bool
    member_b_completed_today: bool
    both_completed_today: bool
    total_habits: int

    model_config = {"from_attributes": True}

"""Habit and check-in Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.core.progression import TreeStage
from app.models.habit import Frequency, KeySkill


class HabitCreate(BaseModel):
    duo_id: int
    title: str = Field(max_length=200)
    frequency: Frequency = Frequency.DAILY
    key_skill: KeySkill = KeySkill.DISCIPLINE
    difficulty: int = 1


class HabitUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    frequency: Frequency | None = None
    key_skill: KeySkill | None = None
    difficulty: int | None = None


class HabitState(BaseModel):
    id: int
    duo_id: int
    title: str
    frequency: Frequency
    key_skill: KeySkill
    difficulty: int
    last_checkin_at_a: datetime | None
    last_checkin_at_b: datetime | None
    last_checkin_at: datetime | None
    checkin_history: dict
    created_at: datetime

    model_config = {"from_attributes": True}


class CheckinRequest(BaseModel):
    is_member_a: bool
    now: datetime | None = None  # defaults to server time


class CheckinResponse(BaseModel):
    updated: bool  # true when a mutual completion was credited
    both_completed: bool
    streak_credited: bool
    trust_score: int | None = None
    streak: int | None = None
    tree_stage: TreeStage | None = None
    stage_changed: bool = False

    model_config = {"from_attributes": True}

"""Level-related Pydantic schemas."""

from pydantic import BaseModel

from app.core.progression import TreeStage


class LevelDataResponse(BaseModel):
    trust_score: int
    level: int
    xp_into_level: int
    xp_needed: int
    progress: float  # in [0, 1)
    stage: TreeStage


class LevelPreviewRow(BaseModel):
    level: int
    total_trust: int
    trust_for_next: int
    completions_needed: int
    stage: TreeStage

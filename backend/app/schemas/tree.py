"""Tree-related Pydantic schemas."""

from pydantic import BaseModel

from app.core.progression import TreeStage


class GrowthLogEntry(BaseModel):
    day: str
    change: str


class TreeState(BaseModel):
    id: int
    duo_id: int
    stage: TreeStage
    growth_log: list[GrowthLogEntry]
    leaves: int
    fruits: int
    decay: int

    model_config = {"from_attributes": True}


class TreeSyncResponse(BaseModel):
    updated: bool
    new_stage: TreeStage | None = None

    model_config = {"from_attributes": True}

"""Level endpoints - pure progression-curve lookups, no storage access."""

from fastapi import APIRouter, Path, Query

from app.core.progression import get_level_data, get_leveling_preview, stage_of
from app.schemas.level import LevelDataResponse, LevelPreviewRow

router = APIRouter()


@router.get("/preview", response_model=list[LevelPreviewRow])
async def leveling_preview(max_level: int = Query(default=30, ge=0, le=200)):
    """Curve table: trust needed per level and the stage each level maps to."""
    return get_leveling_preview(max_level)


@router.get("/{trust_score}", response_model=LevelDataResponse)
async def level_data(trust_score: int = Path(ge=0)):
    data = get_level_data(trust_score)
    return LevelDataResponse(
        trust_score=trust_score,
        level=data.level,
        xp_into_level=data.xp_into_level,
        xp_needed=data.xp_needed,
        progress=data.progress,
        stage=stage_of(data.level),
    )

"""Duo endpoints - form duos, inspect them and manage their streak."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import http_errors
from app.core.clock import utc_now
from app.core.progression import level_of
from app.db.database import get_db
from app.models.duo import DuoConnection
from app.schemas.duo import DuoCreate, DuoState, StreakInfoResponse
from app.services.duo_service import duo_service

router = APIRouter()


def _duo_to_response(duo: DuoConnection) -> DuoState:
    """Convert ORM model to response schema with the derived level."""
    return DuoState(
        id=duo.id,
        member_a_id=duo.member_a_id,
        member_b_id=duo.member_b_id,
        trust_score=duo.trust_score,
        streak=duo.streak,
        streak_credited_date=duo.streak_credited_date,
        streak_credited_week=duo.streak_credited_week,
        tree_stage=duo.tree_stage,
        level=level_of(duo.trust_score),
        created_at=duo.created_at,
        last_updated=duo.last_updated,
    )


@router.post("/", response_model=DuoState, status_code=201)
async def create_duo(data: DuoCreate, response: Response, db: AsyncSession = Depends(get_db)):
    """Form a duo (with its tree and default habits). Existing pairs are returned as-is."""
    with http_errors():
        duo, created = await duo_service.create_duo(db, data.member_a_id, data.member_b_id, utc_now())
    if not created:
        response.status_code = 200
    return _duo_to_response(duo)


@router.get("/member/{member_id}", response_model=list[DuoState])
async def list_member_duos(member_id: str, db: AsyncSession = Depends(get_db)):
    """All duos a member belongs to, in either slot."""
    duos = await duo_service.get_duos_for_member(db, member_id)
    return [_duo_to_response(duo) for duo in duos]


@router.get("/{duo_id}", response_model=DuoState)
async def get_duo(duo_id: int, db: AsyncSession = Depends(get_db)):
    with http_errors():
        duo = await duo_service.get_duo(db, duo_id)
    return _duo_to_response(duo)


@router.get("/{duo_id}/streak", response_model=StreakInfoResponse)
async def get_streak(duo_id: int, db: AsyncSession = Depends(get_db)):
    """Current streak and today's completion status for both members."""
    with http_errors():
        info = await duo_service.get_streak_info(db, duo_id, utc_now())
    return StreakInfoResponse.model_validate(info)


@router.post("/{duo_id}/streak/reset", response_model=DuoState)
async def reset_streak(duo_id: int, db: AsyncSession = Depends(get_db)):
    with http_errors():
        duo = await duo_service.reset_streak(db, duo_id, utc_now())
    return _duo_to_response(duo)

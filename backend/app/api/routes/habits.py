"""Habit endpoints - CRUD plus the check-in entry point."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_checkin_service, http_errors
from app.core.clock import utc_now
from app.db.database import get_db
from app.schemas.habit import CheckinRequest, CheckinResponse, HabitCreate, HabitState, HabitUpdate
from app.services.checkin_service import CheckinService
from app.services.habit_service import habit_service

router = APIRouter()


@router.get("/duo/{duo_id}", response_model=list[HabitState])
async def list_habits(duo_id: int, db: AsyncSession = Depends(get_db)):
    """List a duo's habits, newest first."""
    return await habit_service.list_habits(db, duo_id)


@router.post("/", response_model=HabitState, status_code=201)
async def create_habit(data: HabitCreate, db: AsyncSession = Depends(get_db)):
    with http_errors():
        return await habit_service.create_habit(
            db,
            duo_id=data.duo_id,
            title=data.title,
            frequency=data.frequency,
            now=utc_now(),
            key_skill=data.key_skill,
            difficulty=data.difficulty,
        )


@router.patch("/{habit_id}", response_model=HabitState)
async def update_habit(habit_id: int, data: HabitUpdate, db: AsyncSession = Depends(get_db)):
    """Update only the provided fields."""
    with http_errors():
        return await habit_service.update_habit(db, habit_id, data.model_dump(exclude_unset=True))


@router.delete("/{habit_id}", status_code=204)
async def delete_habit(habit_id: int, db: AsyncSession = Depends(get_db)):
    with http_errors():
        await habit_service.delete_habit(db, habit_id)


@router.post("/{habit_id}/checkin", response_model=CheckinResponse)
async def checkin(
    habit_id: int,
    req: CheckinRequest,
    service: CheckinService = Depends(get_checkin_service),
):
    """Record a member's check-in; credits the duo when both have checked in."""
    with http_errors():
        result = await service.record_checkin(habit_id, req.is_member_a, req.now or utc_now())
    return CheckinResponse.model_validate(result)

"""Habit service - create, list, edit and delete a duo's habits."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import as_utc
from app.core.errors import DuoNotFoundError, HabitNotFoundError, ValidationError
from app.models.duo import DuoConnection
from app.models.habit import DuoHabit, Frequency, KeySkill

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 50
DIFFICULTY_RANGE = (1, 5)


def clean_title(title: str) -> str:
    """Trim and validate a habit title."""
    trimmed = title.strip()
    if not trimmed:
        raise ValidationError("Habit title is required")
    if len(trimmed) < TITLE_MIN_LENGTH:
        raise ValidationError(f"Habit title must be at least {TITLE_MIN_LENGTH} characters long")
    if len(trimmed) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Habit title must be at most {TITLE_MAX_LENGTH} characters long")
    return trimmed


def check_difficulty(difficulty: int) -> int:
    low, high = DIFFICULTY_RANGE
    if not low <= difficulty <= high:
        raise ValidationError(f"Difficulty must be between {low} and {high}")
    return difficulty


class HabitService:
    @staticmethod
    async def list_habits(db: AsyncSession, duo_id: int) -> list[DuoHabit]:
        """All habits of a duo, newest first."""
        result = await db.execute(
            select(DuoHabit)
            .where(DuoHabit.duo_id == duo_id)
            .order_by(DuoHabit.created_at.desc(), DuoHabit.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_habit(db: AsyncSession, habit_id: int) -> DuoHabit:
        habit = await db.get(DuoHabit, habit_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    async def _ensure_unique_title(
        self, db: AsyncSession, duo_id: int, title: str, exclude_id: int | None = None
    ) -> None:
        for habit in await self.list_habits(db, duo_id):
            if habit.id != exclude_id and habit.title.lower() == title.lower():
                raise ValidationError("A habit with this title already exists")

    async def create_habit(
        self,
        db: AsyncSession,
        duo_id: int,
        title: str,
        frequency: Frequency,
        now: datetime,
        key_skill: KeySkill = KeySkill.DISCIPLINE,
        difficulty: int = 1,
    ) -> DuoHabit:
        if await db.get(DuoConnection, duo_id) is None:
            raise DuoNotFoundError(duo_id)

        title = clean_title(title)
        await self._ensure_unique_title(db, duo_id, title)

        habit = DuoHabit(
            duo_id=duo_id,
            title=title,
            frequency=frequency,
            key_skill=key_skill,
            difficulty=check_difficulty(difficulty),
            checkin_history={},
            created_at=as_utc(now),
        )
        db.add(habit)
        await db.flush()
        await db.refresh(habit)
        return habit

    async def update_habit(self, db: AsyncSession, habit_id: int, changes: dict) -> DuoHabit:
        """Apply partial changes. Switching frequency clears both check-in slots."""
        habit = await self.get_habit(db, habit_id)

        if changes.get("title") is not None:
            title = clean_title(changes["title"])
            await self._ensure_unique_title(db, habit.duo_id, title, exclude_id=habit.id)
            habit.title = title

        if changes.get("frequency") is not None and changes["frequency"] != habit.frequency:
            habit.frequency = changes["frequency"]
            habit.last_checkin_at_a = None
            habit.last_checkin_at_b = None
            habit.last_checkin_at = None

        if changes.get("key_skill") is not None:
            habit.key_skill = changes["key_skill"]

        if changes.get("difficulty") is not None:
            habit.difficulty = check_difficulty(changes["difficulty"])

        await db.flush()
        await db.refresh(habit)
        return habit

    async def delete_habit(self, db: AsyncSession, habit_id: int) -> None:
        habit = await self.get_habit(db, habit_id)
        await db.delete(habit)
        await db.flush()


habit_service = HabitService()

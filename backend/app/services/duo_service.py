"""Duo service - forms duos and answers streak questions about them."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

import yaml
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.clock import as_utc, day_key
from app.core.errors import DuoNotFoundError, ValidationError
from app.core.progression import TreeStage
from app.models.duo import DuoConnection
from app.models.habit import DuoHabit, Frequency, KeySkill
from app.models.tree import Tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakInfo:
    current_streak: int
    streak_credited_date: date | None
    member_a_completed_today: bool
    member_b_completed_today: bool
    both_completed_today: bool
    total_habits: int


class DuoService:
    def __init__(self, habits_file: Path | None = None):
        self.habits_file = habits_file or settings.DEFAULT_HABITS_FILE
        self._default_habits: list[dict] | None = None

    def load_default_habits(self) -> list[dict]:
        """Load the habits seeded into every new duo from YAML (cached)."""
        if self._default_habits is not None:
            return self._default_habits

        with open(self.habits_file, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        habits = []
        for entry in raw.get("habits", []):
            habits.append({
                "title": entry["title"],
                "key_skill": KeySkill(entry.get("key_skill", KeySkill.DISCIPLINE.value)),
                "difficulty": int(entry.get("difficulty", 1)),
                "frequency": Frequency(entry.get("frequency", Frequency.DAILY.value)),
            })
        self._default_habits = habits
        return habits

    async def create_duo(
        self, db: AsyncSession, member_a_id: str, member_b_id: str, now: datetime
    ) -> tuple[DuoConnection, bool]:
        """Form a duo with its tree and seeded habits. Returns (duo, created)."""
        if member_a_id == member_b_id:
            raise ValidationError("A duo needs two different members")

        result = await db.execute(
            select(DuoConnection).where(
                DuoConnection.member_a_id == member_a_id,
                DuoConnection.member_b_id == member_b_id,
            )
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            return existing, False

        now = as_utc(now)
        duo = DuoConnection(
            member_a_id=member_a_id,
            member_b_id=member_b_id,
            trust_score=0,
            streak=0,
            tree_stage=TreeStage.SPROUT,
            created_at=now,
        )
        db.add(duo)
        await db.flush()

        db.add(Tree(duo_id=duo.id, stage=TreeStage.SPROUT, growth_log=[]))
        for seed in self.load_default_habits():
            db.add(DuoHabit(duo_id=duo.id, checkin_history={}, created_at=now, **seed))
        await db.flush()
        await db.refresh(duo)

        logger.info("Duo %s formed for members %s and %s", duo.id, member_a_id, member_b_id)
        return duo, True

    @staticmethod
    async def get_duo(db: AsyncSession, duo_id: int) -> DuoConnection:
        duo = await db.get(DuoConnection, duo_id)
        if duo is None:
            raise DuoNotFoundError(duo_id)
        return duo

    @staticmethod
    async def get_duos_for_member(db: AsyncSession, member_id: str) -> list[DuoConnection]:
        result = await db.execute(
            select(DuoConnection)
            .where(or_(DuoConnection.member_a_id == member_id, DuoConnection.member_b_id == member_id))
            .order_by(DuoConnection.id)
        )
        return list(result.scalars().all())

    async def get_streak_info(self, db: AsyncSession, duo_id: int, now: datetime) -> StreakInfo:
        """Streak plus which members have checked in today on any habit."""
        duo = await self.get_duo(db, duo_id)
        result = await db.execute(select(DuoHabit).where(DuoHabit.duo_id == duo_id))
        habits = result.scalars().all()

        today = day_key(now)
        a_today = b_today = both_today = False
        for habit in habits:
            a_done = habit.last_checkin_at_a is not None and day_key(habit.last_checkin_at_a) == today
            b_done = habit.last_checkin_at_b is not None and day_key(habit.last_checkin_at_b) == today
            a_today = a_today or a_done
            b_today = b_today or b_done
            both_today = both_today or (a_done and b_done)

        return StreakInfo(
            current_streak=duo.streak,
            streak_credited_date=duo.streak_credited_date,
            member_a_completed_today=a_today,
            member_b_completed_today=b_today,
            both_completed_today=both_today,
            total_habits=len(habits),
        )

    async def reset_streak(self, db: AsyncSession, duo_id: int, now: datetime) -> DuoConnection:
        """Zero the streak. Trust score and tree stage are left alone."""
        duo = await self.get_duo(db, duo_id)
        duo.streak = 0
        duo.streak_credited_date = None
        duo.streak_credited_week = None
        duo.last_updated = as_utc(now)
        await db.flush()
        await db.refresh(duo)
        logger.info("Duo %s streak reset", duo_id)
        return duo


duo_service = DuoService()

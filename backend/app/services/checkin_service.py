"""Check-in service - reconciles one member's check-in against a duo habit.

A check-in only moves the duo forward when the partner has also checked in
within the habit's active window (mutual completion). The whole reconciliation
runs as one transaction that touches rows in a fixed order (habit, duo,
tree), so racing check-ins from both members serialize instead of missing
each other or deadlocking. A member checking in again within the same period
changes nothing: each member's completion counts once per period.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.clock import Frequency, as_utc, day_key, in_same_period, period_bounds, period_start
from app.core.errors import HabitNotFoundError
from app.core.progression import TreeStage, stage_for_trust
from app.db.transaction import run_in_transaction
from app.models.habit import DuoHabit
from app.services.ledger_service import LedgerService
from app.services.tree_service import TreeService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckinResult:
    updated: bool
    both_completed: bool
    streak_credited: bool = False
    trust_score: int | None = None
    streak: int | None = None
    tree_stage: TreeStage | None = None
    stage_changed: bool = False


def member_slot(is_member_a: bool) -> str:
    return "A" if is_member_a else "B"


class CheckinService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def record_checkin(self, habit_id: int, is_member_a: bool, now: datetime) -> CheckinResult:
        """Record a member's check-in and credit the duo on mutual completion."""
        now = as_utc(now)

        async def _reconcile(session: AsyncSession) -> CheckinResult:
            return await self._reconcile(session, habit_id, is_member_a, now)

        return await run_in_transaction(
            self.session_factory, _reconcile, label=f"record_checkin(habit={habit_id})"
        )

    async def _reconcile(
        self, session: AsyncSession, habit_id: int, is_member_a: bool, now: datetime
    ) -> CheckinResult:
        own_slot = DuoHabit.last_checkin_at_a if is_member_a else DuoHabit.last_checkin_at_b
        partner_slot = DuoHabit.last_checkin_at_b if is_member_a else DuoHabit.last_checkin_at_a

        day_start, day_end = period_bounds(now, Frequency.DAILY)
        week_start, week_end = period_bounds(now, Frequency.WEEKLY)
        first_in_period = or_(
            own_slot.is_(None),
            and_(
                DuoHabit.frequency == Frequency.DAILY,
                or_(own_slot < day_start, own_slot >= day_end),
            ),
            and_(
                DuoHabit.frequency == Frequency.WEEKLY,
                or_(own_slot < week_start, own_slot >= week_end),
            ),
        )

        # Write our slot and read the partner's in one statement
        result = await session.execute(
            update(DuoHabit)
            .where(DuoHabit.id == habit_id, first_in_period)
            .values({own_slot: now, DuoHabit.last_checkin_at: now})
            .returning(DuoHabit.duo_id, DuoHabit.frequency, partner_slot)
            .execution_options(synchronize_session=False)
        )
        row = result.one_or_none()
        if row is None:
            return await self._repeat_checkin(session, habit_id, is_member_a, now)
        duo_id, frequency, partner_checkin = row

        if not in_same_period(now, partner_checkin, frequency):
            logger.debug(
                "Habit %s: member %s checked in, waiting on partner",
                habit_id, member_slot(is_member_a),
            )
            return CheckinResult(updated=False, both_completed=False)

        credit = await LedgerService.apply_credit(session, duo_id, now, frequency)
        await self._record_history(session, habit_id, is_member_a, now, frequency)
        sync = await TreeService.apply_sync(session, duo_id, now)

        logger.info(
            "Habit %s mutual completion for duo %s: trust=%d streak=%d",
            habit_id, duo_id, credit.trust_score, credit.streak,
        )
        return CheckinResult(
            updated=True,
            both_completed=True,
            streak_credited=credit.streak_credited,
            trust_score=credit.trust_score,
            streak=credit.streak,
            tree_stage=stage_for_trust(credit.trust_score),
            stage_changed=sync.updated,
        )

    @staticmethod
    async def _repeat_checkin(
        session: AsyncSession, habit_id: int, is_member_a: bool, now: datetime
    ) -> CheckinResult:
        """The member already checked in this period: report state, credit nothing."""
        partner_slot = DuoHabit.last_checkin_at_b if is_member_a else DuoHabit.last_checkin_at_a
        row = (
            await session.execute(
                select(DuoHabit.frequency, partner_slot).where(DuoHabit.id == habit_id)
            )
        ).one_or_none()
        if row is None:
            raise HabitNotFoundError(habit_id)
        frequency, partner_checkin = row

        logger.debug(
            "Habit %s: member %s already checked in for this period",
            habit_id, member_slot(is_member_a),
        )
        return CheckinResult(
            updated=False, both_completed=in_same_period(now, partner_checkin, frequency)
        )

    @staticmethod
    async def _record_history(
        session: AsyncSession,
        habit_id: int,
        is_member_a: bool,
        now: datetime,
        frequency: Frequency,
    ) -> None:
        habit = (
            await session.execute(select(DuoHabit).where(DuoHabit.id == habit_id))
        ).scalar_one()
        history = dict(habit.checkin_history or {})
        history[day_key(now)] = {
            "member_a": True,
            "member_b": True,
            "triggered_by": member_slot(is_member_a),
            "period": period_start(now, frequency).isoformat(),
        }
        habit.checkin_history = history
        await session.flush()

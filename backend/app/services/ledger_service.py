"""Streak & trust ledger - credits a duo once per mutual completion event.

Trust accrues on every mutual completion. The streak moves at most once per
calendar day, across all of the duo's habits, and a weekly habit moves it at
most once per week. A missed day or week does not break the streak. Both
rules are expressed as single UPDATE statements so the database, not Python,
does the read-modify-write.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.clock import Frequency, as_utc, start_of_day, start_of_week
from app.core.errors import DuoNotFoundError
from app.core.progression import TRUST_INCREMENT
from app.db.transaction import run_in_transaction
from app.models.duo import DuoConnection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreditResult:
    trust_score: int
    streak: int
    streak_credited: bool
    streak_credited_date: date | None


class LedgerService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def credit_period(
        self, duo_id: int, now: datetime, frequency: Frequency = Frequency.DAILY
    ) -> CreditResult:
        """Credit one mutual completion to the duo, atomically."""

        async def _credit(session: AsyncSession) -> CreditResult:
            return await self.apply_credit(session, duo_id, now, frequency)

        return await run_in_transaction(
            self.session_factory, _credit, label=f"credit_period(duo={duo_id})"
        )

    @staticmethod
    async def apply_credit(
        session: AsyncSession, duo_id: int, now: datetime, frequency: Frequency
    ) -> CreditResult:
        """Run the credit statements on an open transaction."""
        now = as_utc(now)
        today = start_of_day(now).date()
        week = start_of_week(now).date()

        trust = await session.execute(
            update(DuoConnection)
            .where(DuoConnection.id == duo_id)
            .values(
                trust_score=DuoConnection.trust_score + TRUST_INCREMENT,
                last_updated=now,
            )
            .execution_options(synchronize_session=False)
        )
        if trust.rowcount == 0:
            raise DuoNotFoundError(duo_id)

        conditions = [
            DuoConnection.id == duo_id,
            or_(
                DuoConnection.streak_credited_date.is_(None),
                DuoConnection.streak_credited_date != today,
            ),
        ]
        values = {"streak": DuoConnection.streak + 1, "streak_credited_date": today}
        if frequency == Frequency.WEEKLY:
            conditions.append(
                or_(
                    DuoConnection.streak_credited_week.is_(None),
                    DuoConnection.streak_credited_week != week,
                )
            )
            values["streak_credited_week"] = week

        streak = await session.execute(
            update(DuoConnection)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        streak_credited = streak.rowcount == 1

        row = (
            await session.execute(
                select(
                    DuoConnection.trust_score,
                    DuoConnection.streak,
                    DuoConnection.streak_credited_date,
                ).where(DuoConnection.id == duo_id)
            )
        ).one()

        if streak_credited:
            logger.info("Duo %s streak credited for %s: streak=%d", duo_id, today, row.streak)
        else:
            logger.debug("Duo %s streak already credited for %s (%s)", duo_id, today, frequency.value)

        return CreditResult(
            trust_score=row.trust_score,
            streak=row.streak,
            streak_credited=streak_credited,
            streak_credited_date=row.streak_credited_date,
        )

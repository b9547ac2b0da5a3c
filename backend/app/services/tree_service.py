"""Tree service - keeps the duo's tree stage in step with its trust score."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.clock import as_utc, day_key
from app.core.errors import DuoNotFoundError, TreeNotFoundError
from app.core.progression import TreeStage, stage_for_trust
from app.db.transaction import run_in_transaction
from app.models.duo import DuoConnection
from app.models.tree import Tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    updated: bool
    new_stage: TreeStage | None = None


def log_growth(growth_log: list[dict], day: str, change: str) -> list[dict]:
    """Return a new log with ``change`` recorded for ``day``.

    The log keeps one entry per day: a second change on the same day
    replaces the first in place.
    """
    entries = [dict(entry) for entry in growth_log or []]
    for entry in entries:
        if entry.get("day") == day:
            entry["change"] = change
            return entries
    entries.append({"day": day, "change": change})
    return entries


class TreeService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_tree(self, duo_id: int) -> Tree:
        async with self.session_factory() as session:
            tree = await _get_tree(session, duo_id)
            if tree is None:
                raise TreeNotFoundError(duo_id)
            return tree

    async def sync_tree_stage(self, duo_id: int, now: datetime) -> SyncResult:
        """Evolve the tree if the trust score implies a different stage."""

        async def _sync(session: AsyncSession) -> SyncResult:
            return await self.apply_sync(session, duo_id, now)

        return await run_in_transaction(
            self.session_factory, _sync, label=f"sync_tree_stage(duo={duo_id})"
        )

    @staticmethod
    async def apply_sync(session: AsyncSession, duo_id: int, now: datetime) -> SyncResult:
        result = await session.execute(
            select(DuoConnection).where(DuoConnection.id == duo_id).with_for_update()
        )
        duo = result.scalar_one_or_none()
        if duo is None:
            raise DuoNotFoundError(duo_id)

        expected = stage_for_trust(duo.trust_score)
        if expected == duo.tree_stage:
            return SyncResult(updated=False)

        tree = await _get_tree(session, duo_id, for_update=True)
        if tree is None:
            raise TreeNotFoundError(duo_id)

        previous = duo.tree_stage
        duo.tree_stage = expected
        tree.stage = expected
        tree.growth_log = log_growth(
            tree.growth_log, day_key(now), f"Tree evolved to {expected.value}"
        )
        duo.last_updated = as_utc(now)
        await session.flush()

        logger.info("Duo %s tree evolved: %s -> %s", duo_id, previous.value, expected.value)
        return SyncResult(updated=True, new_stage=expected)


async def _get_tree(session: AsyncSession, duo_id: int, for_update: bool = False) -> Tree | None:
    stmt = select(Tree).where(Tree.duo_id == duo_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return result.scalar_one_or_none()

"""Transaction runner with retry-on-conflict semantics.

Each unit of work gets a fresh session and a single transaction. Transient
contention errors (serialization failures, deadlocks, SQLite lock timeouts)
roll the transaction back and re-run the whole unit; anything else
propagates unchanged.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.core.errors import ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected
TRANSIENT_SQLSTATES = {"40001", "40P01"}


def is_transient(exc: DBAPIError) -> bool:
    """True if the error is write contention that a retry can resolve."""
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        sqlstate = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if sqlstate in TRANSIENT_SQLSTATES:
            return True
    return isinstance(exc, OperationalError) and "locked" in str(orig).lower()


async def run_in_transaction(
    session_factory: async_sessionmaker[AsyncSession],
    work: Callable[[AsyncSession], Awaitable[T]],
    *,
    label: str = "transaction",
    max_retries: int | None = None,
    backoff: float | None = None,
) -> T:
    """Run ``work(session)`` inside one transaction, retrying on contention."""
    attempts = max_retries if max_retries is not None else settings.TRANSACTION_MAX_RETRIES
    delay = backoff if backoff is not None else settings.TRANSACTION_RETRY_BACKOFF

    for attempt in range(1, attempts + 1):
        try:
            async with session_factory() as session:
                async with session.begin():
                    return await work(session)
        except DBAPIError as exc:
            if not is_transient(exc):
                raise
            logger.warning(
                "%s hit write contention (attempt %d/%d): %s",
                label, attempt, attempts, exc.orig,
            )
            if attempt < attempts:
                await asyncio.sleep(delay * attempt)

    raise ConflictError(f"{label} failed after {attempts} attempts due to concurrent writes")

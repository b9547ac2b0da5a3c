"""Shared route dependencies and domain-error translation."""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.database import get_session_factory
from app.services.checkin_service import CheckinService
from app.services.tree_service import TreeService


@contextmanager
def http_errors() -> Iterator[None]:
    """Map domain errors raised inside the block to HTTP responses."""
    try:
        yield
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


def get_checkin_service(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> CheckinService:
    return CheckinService(factory)


def get_tree_service(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> TreeService:
    return TreeService(factory)

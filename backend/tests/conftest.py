"""Shared test fixtures - uses a throwaway SQLite file per test (no Docker needed)."""

import os

# Keep the app's module-level engine off PostgreSQL while tests import it
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from app.core.progression import TreeStage  # noqa: E402
from app.db.database import Base, get_db, get_session_factory  # noqa: E402


@pytest.fixture
async def engine(tmp_path):
    """Fresh database with all tables for each test."""
    # Import all models so Base.metadata knows about them
    import app.models  # noqa: F401

    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """Direct async DB session for service-level tests."""
    async with session_factory() as session:
        yield session
        await session.commit()


@pytest.fixture
def seed_duo(session_factory):
    """Insert a duo with its tree and one habit, committed. Returns the ORM rows."""
    from app.models import DuoConnection, DuoHabit, Frequency, Tree

    async def _seed(
        trust_score: int = 0,
        streak: int = 0,
        streak_credited_date: date | None = None,
        frequency: Frequency = Frequency.DAILY,
        with_tree: bool = True,
        members: tuple[str, str] = ("alice", "bob"),
    ):
        async with session_factory() as session:
            stage = TreeStage.SPROUT
            duo = DuoConnection(
                member_a_id=members[0],
                member_b_id=members[1],
                trust_score=trust_score,
                streak=streak,
                streak_credited_date=streak_credited_date,
                tree_stage=stage,
            )
            session.add(duo)
            await session.flush()
            tree = None
            if with_tree:
                tree = Tree(duo_id=duo.id, stage=stage, growth_log=[])
                session.add(tree)
            habit = DuoHabit(duo_id=duo.id, title="Morning Walk", frequency=frequency, checkin_history={})
            session.add(habit)
            await session.commit()
            return duo, tree, habit

    return _seed


@pytest.fixture
def load(session_factory):
    """Re-read a row in a fresh session so assertions see committed state."""

    async def _load(model, **filters):
        from sqlalchemy import select

        async with session_factory() as session:
            stmt = select(model).filter_by(**filters)
            return (await session.execute(stmt)).scalar_one_or_none()

    return _load


@pytest.fixture
async def client(session_factory):
    """Async HTTP test client with test DB override."""
    from app.main import app

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

"""Tests for the habit service - validation and edits."""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import DuoNotFoundError, HabitNotFoundError, ValidationError
from app.models import DuoHabit, Frequency, KeySkill
from app.services.habit_service import check_difficulty, clean_title, habit_service

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def test_clean_title_trims():
    assert clean_title("  Evening Run  ") == "Evening Run"


@pytest.mark.parametrize("title", ["", "   ", "ab", "x" * 51])
def test_clean_title_rejects(title):
    with pytest.raises(ValidationError):
        clean_title(title)


def test_check_difficulty_bounds():
    assert check_difficulty(1) == 1
    assert check_difficulty(5) == 5
    with pytest.raises(ValidationError):
        check_difficulty(0)
    with pytest.raises(ValidationError):
        check_difficulty(6)


async def test_create_habit(seed_duo, db):
    duo, _, _ = await seed_duo()
    habit = await habit_service.create_habit(
        db, duo.id, " Stretch ", Frequency.WEEKLY, NOW, key_skill=KeySkill.COURAGE, difficulty=3
    )

    assert habit.title == "Stretch"
    assert habit.frequency == Frequency.WEEKLY
    assert habit.key_skill == KeySkill.COURAGE
    assert habit.difficulty == 3
    assert habit.last_checkin_at_a is None
    assert habit.last_checkin_at_b is None
    assert habit.checkin_history == {}


async def test_create_habit_duplicate_title(seed_duo, db):
    duo, _, _ = await seed_duo()
    with pytest.raises(ValidationError):
        await habit_service.create_habit(db, duo.id, "morning walk", Frequency.DAILY, NOW)


async def test_create_habit_missing_duo(db):
    with pytest.raises(DuoNotFoundError):
        await habit_service.create_habit(db, 999, "Stretch", Frequency.DAILY, NOW)


async def test_list_habits_newest_first(seed_duo, db):
    duo, _, seeded = await seed_duo()
    newer = await habit_service.create_habit(db, duo.id, "Stretch", Frequency.DAILY, NOW + timedelta(days=3650))

    habits = await habit_service.list_habits(db, duo.id)
    assert [h.id for h in habits] == [newer.id, seeded.id]


async def test_frequency_change_clears_checkins(seed_duo, db):
    _, _, seeded = await seed_duo()
    habit = await habit_service.get_habit(db, seeded.id)
    habit.last_checkin_at_a = NOW
    habit.last_checkin_at = NOW
    await db.flush()

    updated = await habit_service.update_habit(db, seeded.id, {"frequency": Frequency.WEEKLY})
    assert updated.frequency == Frequency.WEEKLY
    assert updated.last_checkin_at_a is None
    assert updated.last_checkin_at is None


async def test_update_without_frequency_change_keeps_checkins(seed_duo, db):
    _, _, seeded = await seed_duo()
    habit = await habit_service.get_habit(db, seeded.id)
    habit.last_checkin_at_b = NOW
    await db.flush()

    updated = await habit_service.update_habit(
        db, seeded.id, {"title": "Sunrise Walk", "frequency": Frequency.DAILY, "difficulty": 2}
    )
    assert updated.title == "Sunrise Walk"
    assert updated.difficulty == 2
    assert updated.last_checkin_at_b is not None


async def test_rename_to_own_title_allowed(seed_duo, db):
    _, _, seeded = await seed_duo()
    updated = await habit_service.update_habit(db, seeded.id, {"title": "MORNING WALK"})
    assert updated.title == "MORNING WALK"


async def test_delete_habit(seed_duo, db):
    _, _, seeded = await seed_duo()
    await habit_service.delete_habit(db, seeded.id)

    assert await db.get(DuoHabit, seeded.id) is None
    with pytest.raises(HabitNotFoundError):
        await habit_service.delete_habit(db, seeded.id)

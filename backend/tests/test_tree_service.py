"""Tests for the tree stage synchronizer."""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import DuoNotFoundError, TreeNotFoundError
from app.core.progression import TreeStage
from app.models import DuoConnection, Tree
from app.services.tree_service import TreeService, log_growth

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


async def test_no_op_below_boundary(session_factory, seed_duo, load):
    duo, _, _ = await seed_duo(trust_score=499)  # level 9
    result = await TreeService(session_factory).sync_tree_stage(duo.id, T0)

    assert result.updated is False
    assert result.new_stage is None
    tree = await load(Tree, duo_id=duo.id)
    assert tree.growth_log == []


async def test_evolves_when_boundary_crossed(session_factory, seed_duo, load):
    duo, _, _ = await seed_duo(trust_score=500)  # level 10
    result = await TreeService(session_factory).sync_tree_stage(duo.id, T0)

    assert result.updated is True
    assert result.new_stage == TreeStage.SMALL_TREE

    stored_duo = await load(DuoConnection, id=duo.id)
    tree = await load(Tree, duo_id=duo.id)
    assert stored_duo.tree_stage == TreeStage.SMALL_TREE
    assert tree.stage == stored_duo.tree_stage
    assert tree.growth_log == [{"day": "2026-03-02", "change": "Tree evolved to smallTree"}]


async def test_second_sync_is_no_op(session_factory, seed_duo):
    duo, _, _ = await seed_duo(trust_score=2000)  # level 20
    service = TreeService(session_factory)

    first = await service.sync_tree_stage(duo.id, T0)
    second = await service.sync_tree_stage(duo.id, T0 + timedelta(hours=1))

    assert first.new_stage == TreeStage.MEDIUM_TREE
    assert second.updated is False


async def test_missing_tree_leaves_duo_untouched(session_factory, seed_duo, load):
    duo, _, _ = await seed_duo(trust_score=500, with_tree=False)

    with pytest.raises(TreeNotFoundError):
        await TreeService(session_factory).sync_tree_stage(duo.id, T0)

    stored = await load(DuoConnection, id=duo.id)
    assert stored.tree_stage == TreeStage.SPROUT


async def test_missing_duo(session_factory):
    with pytest.raises(DuoNotFoundError):
        await TreeService(session_factory).sync_tree_stage(42, T0)


async def test_get_tree(session_factory, seed_duo):
    duo, _, _ = await seed_duo()
    service = TreeService(session_factory)

    tree = await service.get_tree(duo.id)
    assert tree.stage == TreeStage.SPROUT
    assert tree.leaves == 0

    with pytest.raises(TreeNotFoundError):
        await service.get_tree(duo.id + 1)


def test_growth_log_keeps_one_entry_per_day():
    log = log_growth([], "2026-03-02", "Tree evolved to smallTree")
    log = log_growth(log, "2026-03-02", "Tree evolved to mediumTree")
    log = log_growth(log, "2026-03-03", "Tree evolved to grownTree")

    assert log == [
        {"day": "2026-03-02", "change": "Tree evolved to mediumTree"},
        {"day": "2026-03-03", "change": "Tree evolved to grownTree"},
    ]


def test_growth_log_does_not_mutate_input():
    before = [{"day": "2026-03-02", "change": "Tree evolved to smallTree"}]
    log_growth(before, "2026-03-02", "Tree evolved to mediumTree")
    assert before[0]["change"] == "Tree evolved to smallTree"

"""Tests for the progression curve - levels, progress and tree stages."""

import pytest

from app.core.progression import (
    TreeStage,
    curve_floor,
    get_level_data,
    get_leveling_preview,
    level_of,
    stage_for_trust,
    stage_of,
)


def test_curve_floor_is_quadratic():
    assert curve_floor(0) == 0
    assert curve_floor(1) == 5
    assert curve_floor(2) == 20
    assert curve_floor(10) == 500


def test_new_duo_is_level_zero():
    """Scores below the level-1 floor of 5 stay at level 0."""
    for score in range(5):
        assert level_of(score) == 0


def test_level_boundaries_exact():
    assert level_of(5) == 1
    assert level_of(19) == 1
    assert level_of(20) == 2
    assert level_of(44) == 2
    assert level_of(45) == 3
    assert level_of(50) == 3
    assert level_of(499) == 9
    assert level_of(500) == 10


def test_level_matches_curve_definition():
    """level_of(x) is the unique L with floor(L) <= x < floor(L+1)."""
    for score in range(0, 5000, 7):
        level = level_of(score)
        assert curve_floor(level) <= score < curve_floor(level + 1)


def test_negative_trust_rejected():
    with pytest.raises(ValueError):
        level_of(-1)


def test_level_data_at_zero():
    data = get_level_data(0)
    assert data.level == 0
    assert data.xp_into_level == 0
    assert data.xp_needed == 5
    assert data.progress == 0.0


def test_level_data_mid_level():
    data = get_level_data(30)
    assert data.level == 2
    assert data.xp_into_level == 10
    assert data.xp_needed == 25
    assert data.progress == pytest.approx(0.4)


def test_progress_stays_below_one():
    for score in range(0, 2000):
        assert 0.0 <= get_level_data(score).progress < 1.0


def test_stage_thresholds():
    assert stage_of(0) == TreeStage.SPROUT
    assert stage_of(9) == TreeStage.SPROUT
    assert stage_of(10) == TreeStage.SMALL_TREE
    assert stage_of(19) == TreeStage.SMALL_TREE
    assert stage_of(20) == TreeStage.MEDIUM_TREE
    assert stage_of(29) == TreeStage.MEDIUM_TREE
    assert stage_of(30) == TreeStage.GROWN_TREE
    assert stage_of(120) == TreeStage.GROWN_TREE


def test_stage_never_regresses_as_trust_grows():
    order = list(TreeStage)
    previous = 0
    for score in range(0, 6000, 3):
        index = order.index(stage_for_trust(score))
        assert index >= previous
        previous = index


def test_stage_values_match_client_names():
    assert [s.value for s in TreeStage] == ["sprout", "smallTree", "mediumTree", "grownTree"]


def test_leveling_preview():
    preview = get_leveling_preview(12)
    assert len(preview) == 13
    assert preview[0] == {
        "level": 0,
        "total_trust": 0,
        "trust_for_next": 5,
        "completions_needed": 5,
        "stage": TreeStage.SPROUT,
    }
    assert preview[10]["total_trust"] == 500
    assert preview[10]["stage"] == TreeStage.SMALL_TREE

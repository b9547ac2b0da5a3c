"""Progression curve - maps a duo's trust score to level, progress and tree stage.

The curve is quadratic: reaching level ``L`` takes ``5 * L**2`` trust. A new
duo (score 0-4) sits at level 0 until it crosses the level-1 floor of 5.
"""

from dataclasses import dataclass
from enum import Enum
from math import isqrt

CURVE_CONSTANT = 5

# Trust credited per mutual completion event
TRUST_INCREMENT = 1


class TreeStage(str, Enum):
    SPROUT = "sprout"
    SMALL_TREE = "smallTree"
    MEDIUM_TREE = "mediumTree"
    GROWN_TREE = "grownTree"


# (level threshold, stage) - a level below the threshold stays in that stage
STAGE_THRESHOLDS = [
    (10, TreeStage.SPROUT),
    (20, TreeStage.SMALL_TREE),
    (30, TreeStage.MEDIUM_TREE),
]


@dataclass(frozen=True)
class LevelData:
    level: int
    xp_into_level: int
    xp_needed: int
    progress: float


def curve_floor(level: int) -> int:
    """Minimum trust score needed to reach ``level``."""
    return CURVE_CONSTANT * level * level


def level_of(trust_score: int) -> int:
    """Greatest level whose floor does not exceed ``trust_score``."""
    if trust_score < 0:
        raise ValueError(f"trust_score must be non-negative, got {trust_score}")
    # 5*L*L <= x  <=>  L*L <= x // 5 for integer L
    return isqrt(trust_score // CURVE_CONSTANT)


def stage_of(level: int) -> TreeStage:
    for threshold, stage in STAGE_THRESHOLDS:
        if level < threshold:
            return stage
    return TreeStage.GROWN_TREE


def stage_for_trust(trust_score: int) -> TreeStage:
    return stage_of(level_of(trust_score))


def get_level_data(trust_score: int) -> LevelData:
    level = level_of(trust_score)
    floor = curve_floor(level)
    xp_into_level = trust_score - floor
    xp_needed = curve_floor(level + 1) - floor
    return LevelData(
        level=level,
        xp_into_level=xp_into_level,
        xp_needed=xp_needed,
        progress=xp_into_level / xp_needed,
    )


def get_leveling_preview(max_level: int = 30) -> list[dict]:
    """Curve table for levels 0..max_level, used for tuning and the preview CLI."""
    preview = []
    for level in range(max_level + 1):
        xp_for_next = curve_floor(level + 1) - curve_floor(level)
        preview.append({
            "level": level,
            "total_trust": curve_floor(level),
            "trust_for_next": xp_for_next,
            "completions_needed": -(-xp_for_next // TRUST_INCREMENT),
            "stage": stage_of(level),
        })
    return preview

"""Database models package."""

from app.models.duo import DuoConnection
from app.models.habit import DuoHabit, Frequency, KeySkill
from app.models.tree import Tree

__all__ = ["DuoConnection", "DuoHabit", "Frequency", "KeySkill", "Tree"]

"""Duo habit model - a habit both members of a duo check in on."""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, Enum as SAEnum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.clock import Frequency
from app.db.database import Base


class KeySkill(str, Enum):
    DISCIPLINE = "discipline"
    EMPATHY = "empathy"
    CLARITY = "clarity"
    CREATIVITY = "creativity"
    COURAGE = "courage"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class DuoHabit(Base):
    __tablename__ = "duo_habits"

    id: Mapped[int] = mapped_column(primary_key=True)
    duo_id: Mapped[int] = mapped_column(ForeignKey("duo_connections.id"), index=True)
    title: Mapped[str] = mapped_column(String(50))
    frequency: Mapped[Frequency] = mapped_column(
        SAEnum(Frequency, native_enum=False, values_callable=_enum_values, length=10),
        default=Frequency.DAILY,
    )
    key_skill: Mapped[KeySkill] = mapped_column(
        SAEnum(KeySkill, native_enum=False, values_callable=_enum_values, length=20),
        default=KeySkill.DISCIPLINE,
    )
    difficulty: Mapped[int] = mapped_column(Integer, default=1)

    # One slot per member; a duo always has exactly two
    last_checkin_at_a: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_checkin_at_b: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_checkin_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # day key -> {"member_a": bool, "member_b": bool, "triggered_by": "A"|"B", "period": "YYYY-MM-DD"}
    checkin_history: Mapped[dict] = mapped_column(JSON, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

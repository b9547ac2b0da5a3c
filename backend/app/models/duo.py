"""Duo connection model - a pairing of two members sharing habits and a tree."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum as SAEnum, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.progression import TreeStage
from app.db.database import Base


class DuoConnection(Base):
    __tablename__ = "duo_connections"
    __table_args__ = (UniqueConstraint("member_a_id", "member_b_id", name="uq_duo_member_pair"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    member_a_id: Mapped[str] = mapped_column(String(100), index=True)
    member_b_id: Mapped[str] = mapped_column(String(100), index=True)

    # Progression
    trust_score: Mapped[int] = mapped_column(Integer, default=0)
    streak: Mapped[int] = mapped_column(Integer, default=0)
    # Last calendar day the streak moved, whatever the habit frequency
    streak_credited_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    # Sunday of the last week a weekly habit moved the streak
    streak_credited_week: Mapped[date | None] = mapped_column(Date, nullable=True)
    tree_stage: Mapped[TreeStage] = mapped_column(
        SAEnum(TreeStage, native_enum=False, values_callable=lambda e: [m.value for m in e], length=20),
        default=TreeStage.SPROUT,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

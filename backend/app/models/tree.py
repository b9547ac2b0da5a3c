"""Tree model - the duo's shared tree and its growth history."""

from sqlalchemy import JSON, Enum as SAEnum, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.core.progression import TreeStage
from app.db.database import Base


class Tree(Base):
    __tablename__ = "trees"

    id: Mapped[int] = mapped_column(primary_key=True)
    duo_id: Mapped[int] = mapped_column(ForeignKey("duo_connections.id"), unique=True, index=True)

    # Mirrors DuoConnection.tree_stage; both are written in the same transaction
    stage: Mapped[TreeStage] = mapped_column(
        SAEnum(TreeStage, native_enum=False, values_callable=lambda e: [m.value for m in e], length=20),
        default=TreeStage.SPROUT,
    )

    # [{"day": "YYYY-MM-DD", "change": "..."}], at most one entry per day
    growth_log: Mapped[list] = mapped_column(JSON, default=list)

    # Decorative counters, not interpreted by the progression engine
    leaves: Mapped[int] = mapped_column(Integer, default=0)
    fruits: Mapped[int] = mapped_column(Integer, default=0)
    decay: Mapped[int] = mapped_column(Integer, default=0)

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Numeric, String, UniqueConstraint, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from evalservice.core.db import Base


class EvaluationItem(Base):
    """One graded deliverable (e.g. "Final exam") of a grading group."""

    __tablename__ = "evaluation_items"
    __table_args__ = (
        UniqueConstraint(
            "group_id", "evaluation_type_id", "name", name="evaluation_items_group_type_name_key"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    evaluation_system_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    group_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    evaluation_type_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Share of the item within its evaluation type, 0 < weight <= 100
    weight: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)
    min_grade: Mapped[float | None] = mapped_column(Numeric(4, 2, asdecimal=False), nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=text("CURRENT_TIMESTAMP"), nullable=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now(), nullable=True
    )

    @property
    def key(self) -> tuple[str, uuid.UUID]:
        return (self.name, self.evaluation_type_id)

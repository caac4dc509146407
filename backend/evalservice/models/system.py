import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from evalservice.core.db import Base


class EvaluationSystem(Base):
    """Concrete weight per evaluation type chosen for one course."""

    __tablename__ = "evaluation_systems"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, unique=True)
    academic_year_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    validated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=text("CURRENT_TIMESTAMP"), nullable=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now(), nullable=True
    )

    evaluation_groups: Mapped[list["EvaluationGroup"]] = relationship(
        "EvaluationGroup",
        back_populates="system",
        cascade="all, delete-orphan",
        order_by="EvaluationGroup.position",
    )


class EvaluationGroup(Base):
    __tablename__ = "evaluation_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    system_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey(
            "evaluation_systems.id",
            name="evaluation_groups_system_id_fkey",
            ondelete="CASCADE",
        ),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    evaluation_type_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    total_weight: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)

    system: Mapped["EvaluationSystem"] = relationship(
        "EvaluationSystem", back_populates="evaluation_groups"
    )

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from evalservice.core.db import Base


class EvaluationPolicy(Base):
    """Admissible percentage range per evaluation type for one subject."""

    __tablename__ = "evaluation_policies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    subject_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, unique=True)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=text("CURRENT_TIMESTAMP"), nullable=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now(), nullable=True
    )

    policy_rules: Mapped[list["PolicyRule"]] = relationship(
        "PolicyRule",
        back_populates="policy",
        cascade="all, delete-orphan",
        order_by="PolicyRule.position",
    )


class PolicyRule(Base):
    __tablename__ = "evaluation_policy_rules"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    policy_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey(
            "evaluation_policies.id",
            name="evaluation_policy_rules_policy_id_fkey",
            ondelete="CASCADE",
        ),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    evaluation_type_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    min_percentage: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)
    max_percentage: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)

    policy: Mapped["EvaluationPolicy"] = relationship("EvaluationPolicy", back_populates="policy_rules")

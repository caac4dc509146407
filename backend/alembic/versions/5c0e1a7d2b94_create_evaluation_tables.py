"""create evaluation tables

Revision ID: 5c0e1a7d2b94
Revises:
Create Date: 2026-01-12 10:04:31.218533

"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision: str = "5c0e1a7d2b94"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def _timestamps(*, updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        )
    ]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(),
                server_default=sa.text("CURRENT_TIMESTAMP"),
                nullable=True,
            )
        )
    return columns


def upgrade() -> None:
    op.create_table(
        "subjects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("evaluation_policy_id", sa.Uuid(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "courses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("subject_id", sa.Uuid(), nullable=False),
        sa.Column("academic_year_id", sa.Uuid(), nullable=True),
        sa.Column("evaluation_system_id", sa.Uuid(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(
            ["subject_id"],
            ["subjects.id"],
            name="courses_subject_id_fkey",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "evaluation_policies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("subject_id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("subject_id"),
    )

    op.create_table(
        "evaluation_policy_rules",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("policy_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("evaluation_type_id", sa.Uuid(), nullable=False),
        sa.Column("min_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("max_percentage", sa.Numeric(5, 2), nullable=False),
        sa.ForeignKeyConstraint(
            ["policy_id"],
            ["evaluation_policies.id"],
            name="evaluation_policy_rules_policy_id_fkey",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "evaluation_systems",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("course_id", sa.Uuid(), nullable=False),
        sa.Column("academic_year_id", sa.Uuid(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("validated", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("course_id"),
    )

    op.create_table(
        "evaluation_groups",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("system_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("evaluation_type_id", sa.Uuid(), nullable=False),
        sa.Column("total_weight", sa.Numeric(5, 2), nullable=False),
        sa.ForeignKeyConstraint(
            ["system_id"],
            ["evaluation_systems.id"],
            name="evaluation_groups_system_id_fkey",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "evaluation_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("evaluation_system_id", sa.Uuid(), nullable=False),
        sa.Column("group_id", sa.Uuid(), nullable=False),
        sa.Column("evaluation_type_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("weight", sa.Numeric(5, 2), nullable=False),
        sa.Column("min_grade", sa.Numeric(4, 2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "group_id",
            "evaluation_type_id",
            "name",
            name="evaluation_items_group_type_name_key",
        ),
    )
    op.create_index(
        "ix_evaluation_items_evaluation_system_id",
        "evaluation_items",
        ["evaluation_system_id"],
    )
    op.create_index("ix_evaluation_items_group_id", "evaluation_items", ["group_id"])


def downgrade() -> None:
    op.drop_index("ix_evaluation_items_group_id", table_name="evaluation_items")
    op.drop_index("ix_evaluation_items_evaluation_system_id", table_name="evaluation_items")
    op.drop_table("evaluation_items")
    op.drop_table("evaluation_groups")
    op.drop_table("evaluation_systems")
    op.drop_table("evaluation_policy_rules")
    op.drop_table("evaluation_policies")
    op.drop_table("courses")
    op.drop_table("subjects")

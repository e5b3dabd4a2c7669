"""initial schema: properties, units, users, cases, tasks, maintenance plans

Revision ID: 5e1f0c2a9b31
Revises:
Create Date: 2025-03-10 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "5e1f0c2a9b31"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("address", sa.String(512), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_properties_name", "properties", ["name"])

    op.create_table(
        "units",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("property_id", sa.String(32), sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("unit_number", sa.String(32), nullable=False),
        sa.Column("type", sa.String(64), nullable=True),
        sa.Column("size", sa.Float, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_units_property", "units", ["property_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("role", sa.String(16), server_default="skötare"),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(256), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "cases",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("property_id", sa.String(32), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("unit_id", sa.String(32), sa.ForeignKey("units.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(16), server_default="Övrigt"),
        sa.Column("priority", sa.String(16), server_default="normal"),
        sa.Column("status", sa.String(24), server_default="reported"),
        sa.Column("assigned_to", sa.String(64), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_by", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_cases_property", "cases", ["property_id"])
    op.create_index("ix_cases_status", "cases", ["status"])

    op.create_table(
        "tasks",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("case_id", sa.String(32), sa.ForeignKey("cases.id", ondelete="SET NULL"), nullable=True),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("status", sa.String(24), server_default="pending"),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_to", sa.String(64), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_tasks_case", "tasks", ["case_id"])

    op.create_table(
        "maintenance_plans",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("property_id", sa.String(32), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("frequency", sa.String(16), server_default="annual"),
        sa.Column("next_due_date", sa.Date, nullable=True),
        sa.Column("estimated_duration_hours", sa.Float, server_default="2"),
        sa.Column("assigned_to", sa.String(64), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("priority", sa.String(16), server_default="normal"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_maintenance_plans_property", "maintenance_plans", ["property_id"])
    op.create_index("ix_maintenance_plans_next_due", "maintenance_plans", ["next_due_date"])


def downgrade() -> None:
    op.drop_table("maintenance_plans")
    op.drop_table("tasks")
    op.drop_table("cases")
    op.drop_table("users")
    op.drop_table("units")
    op.drop_table("properties")

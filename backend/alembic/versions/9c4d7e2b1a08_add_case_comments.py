"""add case comments

Revision ID: 9c4d7e2b1a08
Revises: 5e1f0c2a9b31
Create Date: 2025-04-02 14:30:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "9c4d7e2b1a08"
down_revision: Union[str, None] = "5e1f0c2a9b31"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "case_comments",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("case_id", sa.String(32), sa.ForeignKey("cases.id", ondelete="CASCADE"), nullable=False),
        sa.Column("author_id", sa.String(64), nullable=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_case_comments_case", "case_comments", ["case_id"])


def downgrade() -> None:
    op.drop_index("ix_case_comments_case", table_name="case_comments")
    op.drop_table("case_comments")

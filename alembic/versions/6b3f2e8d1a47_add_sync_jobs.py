"""add sync jobs lease table

Revision ID: 6b3f2e8d1a47
Revises: 4e1c7a9b2d30
Create Date: 2026-10-14 17:10:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "6b3f2e8d1a47"
down_revision = "4e1c7a9b2d30"
branch_labels = None
depends_on = None

sync_job_status = sa.Enum("pending", "running", "completed", "failed", name="syncjobstatus")


def upgrade() -> None:
    op.create_table(
        "sync_jobs",
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("status", sync_job_status, nullable=False, server_default="pending"),
        sa.Column("lease_owner", sa.String(length=128), nullable=True),
        sa.Column("last_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("name"),
    )


def downgrade() -> None:
    op.drop_table("sync_jobs")
    sync_job_status.drop(op.get_bind(), checkfirst=True)

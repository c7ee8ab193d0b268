"""create sync schema

Revision ID: 4e1c7a9b2d30
Revises:
Create Date: 2026-10-12 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "4e1c7a9b2d30"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "google_credentials",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("access_token", sa.Text(), nullable=True),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("token_expiry", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_google_credentials_user_id"), "google_credentials", ["user_id"], unique=True)

    op.create_table(
        "tracked_domains",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("domain", sa.String(length=255), nullable=False),
        sa.Column("search_console_property", sa.String(length=500), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tracked_domains_user_id"), "tracked_domains", ["user_id"], unique=False)

    op.create_table(
        "tracked_keywords",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("domain_id", sa.Integer(), nullable=False),
        sa.Column("keyword", sa.String(length=500), nullable=False),
        sa.Column("target_url", sa.String(length=2000), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["domain_id"], ["tracked_domains.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tracked_keywords_user_id"), "tracked_keywords", ["user_id"], unique=False)
    op.create_index(op.f("ix_tracked_keywords_domain_id"), "tracked_keywords", ["domain_id"], unique=False)
    op.create_index(op.f("ix_tracked_keywords_keyword"), "tracked_keywords", ["keyword"], unique=False)

    op.create_table(
        "domain_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("domain_id", sa.Integer(), nullable=False),
        sa.Column("snapshot_date", sa.Date(), nullable=False),
        sa.Column("total_clicks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_impressions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avg_position", sa.Float(), nullable=False, server_default="0"),
        sa.Column("avg_ctr", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["domain_id"], ["tracked_domains.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("domain_id", "snapshot_date", name="uq_domain_history_domain_date"),
    )
    op.create_index(op.f("ix_domain_history_domain_id"), "domain_history", ["domain_id"], unique=False)
    op.create_index(op.f("ix_domain_history_snapshot_date"), "domain_history", ["snapshot_date"], unique=False)

    op.create_table(
        "keyword_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("keyword_id", sa.Integer(), nullable=False),
        sa.Column("snapshot_date", sa.Date(), nullable=False),
        sa.Column("position", sa.Float(), nullable=False, server_default="0"),
        sa.Column("clicks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("impressions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ctr", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["keyword_id"], ["tracked_keywords.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("keyword_id", "snapshot_date", name="uq_keyword_history_keyword_date"),
    )
    op.create_index(op.f("ix_keyword_history_keyword_id"), "keyword_history", ["keyword_id"], unique=False)
    op.create_index(op.f("ix_keyword_history_snapshot_date"), "keyword_history", ["snapshot_date"], unique=False)

    op.create_table(
        "pagespeed_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("domain_id", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(length=2000), nullable=False),
        sa.Column("strategy", sa.String(length=16), nullable=False),
        sa.Column("snapshot_date", sa.Date(), nullable=False),
        sa.Column("performance_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("accessibility_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("best_practices_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("seo_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lcp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fid", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ttfb", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fcp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("speed_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tbt", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("raw_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("measured_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["domain_id"], ["tracked_domains.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "domain_id", "url", "strategy", "snapshot_date", name="uq_pagespeed_history_domain_url_strategy_date"
        ),
    )
    op.create_index(op.f("ix_pagespeed_history_domain_id"), "pagespeed_history", ["domain_id"], unique=False)
    op.create_index(op.f("ix_pagespeed_history_snapshot_date"), "pagespeed_history", ["snapshot_date"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_pagespeed_history_snapshot_date"), table_name="pagespeed_history")
    op.drop_index(op.f("ix_pagespeed_history_domain_id"), table_name="pagespeed_history")
    op.drop_table("pagespeed_history")
    op.drop_index(op.f("ix_keyword_history_snapshot_date"), table_name="keyword_history")
    op.drop_index(op.f("ix_keyword_history_keyword_id"), table_name="keyword_history")
    op.drop_table("keyword_history")
    op.drop_index(op.f("ix_domain_history_snapshot_date"), table_name="domain_history")
    op.drop_index(op.f("ix_domain_history_domain_id"), table_name="domain_history")
    op.drop_table("domain_history")
    op.drop_index(op.f("ix_tracked_keywords_keyword"), table_name="tracked_keywords")
    op.drop_index(op.f("ix_tracked_keywords_domain_id"), table_name="tracked_keywords")
    op.drop_index(op.f("ix_tracked_keywords_user_id"), table_name="tracked_keywords")
    op.drop_table("tracked_keywords")
    op.drop_index(op.f("ix_tracked_domains_user_id"), table_name="tracked_domains")
    op.drop_table("tracked_domains")
    op.drop_index(op.f("ix_google_credentials_user_id"), table_name="google_credentials")
    op.drop_table("google_credentials")

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from seo_sync.db.base import Base, JSONType


class PageSpeedHistory(Base):
    __tablename__ = "pagespeed_history"
    __table_args__ = (
        UniqueConstraint(
            "domain_id", "url", "strategy", "snapshot_date", name="uq_pagespeed_history_domain_url_strategy_date"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    domain_id: Mapped[int] = mapped_column(ForeignKey("tracked_domains.id"), index=True)
    url: Mapped[str] = mapped_column(String(2000))
    strategy: Mapped[str] = mapped_column(String(16))
    snapshot_date: Mapped[date] = mapped_column(Date, index=True)

    performance_score: Mapped[int] = mapped_column(Integer, default=0)
    accessibility_score: Mapped[int] = mapped_column(Integer, default=0)
    best_practices_score: Mapped[int] = mapped_column(Integer, default=0)
    seo_score: Mapped[int] = mapped_column(Integer, default=0)

    lcp: Mapped[int] = mapped_column(Integer, default=0)
    fid: Mapped[int] = mapped_column(Integer, default=0)
    # layout shift score * 1000
    cls: Mapped[int] = mapped_column(Integer, default=0)
    ttfb: Mapped[int] = mapped_column(Integer, default=0)
    fcp: Mapped[int] = mapped_column(Integer, default=0)
    speed_index: Mapped[int] = mapped_column(Integer, default=0)
    tbt: Mapped[int] = mapped_column(Integer, default=0)

    raw_data: Mapped[dict | None] = mapped_column(JSONType)

    measured_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from seo_sync.db.base import Base


class KeywordHistory(Base):
    __tablename__ = "keyword_history"
    __table_args__ = (UniqueConstraint("keyword_id", "snapshot_date", name="uq_keyword_history_keyword_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    keyword_id: Mapped[int] = mapped_column(ForeignKey("tracked_keywords.id"), index=True)
    snapshot_date: Mapped[date] = mapped_column(Date, index=True)
    position: Mapped[float] = mapped_column(Float, default=0)
    clicks: Mapped[int] = mapped_column(Integer, default=0)
    impressions: Mapped[int] = mapped_column(Integer, default=0)
    ctr: Mapped[float] = mapped_column(Float, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

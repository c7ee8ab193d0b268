from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from seo_sync.db.base import Base


class SyncJobStatus(str, Enum):
    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"


class SyncJob(Base):
    __tablename__ = "sync_jobs"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    status: Mapped[SyncJobStatus] = mapped_column(
        SAEnum(SyncJobStatus), default=SyncJobStatus.pending
    )
    lease_owner: Mapped[str | None] = mapped_column(String(128))
    last_run_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    next_run_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    error_message: Mapped[str | None] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

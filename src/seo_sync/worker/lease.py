from __future__ import annotations

import os
import socket
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from seo_sync.db.models import SyncJob, SyncJobStatus
from seo_sync.db.session import get_session


def default_owner() -> str:
    return f"{socket.gethostname()}:{os.getpid()}"


class RunLease:
    """Persisted claim on a scheduled run, shared by every replica of the service.

    A replica may run a job only after moving the job's ``next_run_at`` forward
    with a conditional update; replicas that lose the race see zero rows updated.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = get_session,
        owner: str | None = None,
        slack: timedelta = timedelta(minutes=30),
    ) -> None:
        self._session_factory = session_factory
        self._owner = owner or default_owner()
        self._slack = slack

    @property
    def owner(self) -> str:
        return self._owner

    def _ensure_row(self, session: Session, name: str) -> None:
        if session.get(SyncJob, name) is not None:
            return
        session.add(SyncJob(name=name, status=SyncJobStatus.pending))
        try:
            session.commit()
        except IntegrityError:
            # another replica created it first
            session.rollback()

    def claim(self, name: str, now: datetime, interval: timedelta) -> bool:
        # window closes slightly before the next fire so timer jitter cannot lock out the holder
        slack = min(self._slack, interval / 2)
        with self._session_factory() as session:
            self._ensure_row(session, name)
            result = session.execute(
                update(SyncJob)
                .where(
                    SyncJob.name == name,
                    or_(SyncJob.next_run_at.is_(None), SyncJob.next_run_at <= now),
                )
                .values(
                    status=SyncJobStatus.running,
                    lease_owner=self._owner,
                    last_run_at=now,
                    next_run_at=now + interval - slack,
                    error_message=None,
                )
                .execution_options(synchronize_session=False)
            )
            session.commit()
            return result.rowcount == 1

    def release(self, name: str, status: SyncJobStatus, error: str | None = None) -> None:
        with self._session_factory() as session:
            session.execute(
                update(SyncJob)
                .where(SyncJob.name == name, SyncJob.lease_owner == self._owner)
                .values(status=status, error_message=error[:500] if error else None)
                .execution_options(synchronize_session=False)
            )
            session.commit()

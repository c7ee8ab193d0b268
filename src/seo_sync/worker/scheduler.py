from __future__ import annotations

import atexit
import threading
import time
from datetime import timedelta
from typing import Any, Callable, Protocol

from apscheduler.schedulers.background import BackgroundScheduler
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from seo_sync.config.settings import Settings
from seo_sync.db.models import SyncJobStatus, TrackedDomain
from seo_sync.db.session import get_session
from seo_sync.schemas import PageSpeedMetrics, SchedulerStatusInfo
from seo_sync.services.pagespeed_service import PageSpeedService
from seo_sync.utils.clock import Clock, utc_now
from seo_sync.utils.urls import root_url
from seo_sync.worker.lease import RunLease

WARMUP_JOB_ID = "daily_update_warmup"
DAILY_JOB_ID = "daily_update"
LEASE_NAME = "daily-update"
STRATEGIES = ("mobile", "desktop")


class SchedulerPort(Protocol):
    """The slice of the APScheduler scheduler API the orchestrator relies on."""

    @property
    def running(self) -> bool: ...

    def add_job(self, func: Callable[..., Any], trigger: str, **kwargs: Any) -> Any: ...

    def get_job(self, job_id: str) -> Any: ...

    def remove_job(self, job_id: str) -> None: ...

    def start(self) -> None: ...

    def shutdown(self, wait: bool = True) -> None: ...


class SyncOrchestrator:
    """Runs the daily PageSpeed refresh for every tracked domain.

    One instance per process. ``start`` registers a warm-up run shortly after
    startup and a recurring run every ``update_interval_hours``; ``stop`` only
    cancels future fires, a run already in progress finishes on its own.
    Domains are processed one at a time with a fixed pause between them.
    """

    def __init__(
        self,
        settings: Settings,
        pagespeed: PageSpeedService,
        scheduler: SchedulerPort | None = None,
        lease: RunLease | None = None,
        session_factory: Callable[[], Session] = get_session,
        clock: Clock = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._pagespeed = pagespeed
        self._scheduler = scheduler or BackgroundScheduler(timezone=settings.scheduler_tz)
        self._lease = lease
        self._session_factory = session_factory
        self._clock = clock
        self._sleep = sleep
        self._running = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval(self) -> timedelta:
        return timedelta(hours=self._settings.update_interval_hours)

    def start(self) -> None:
        with self._lock:
            if self._running:
                logger.info("Scheduler already running")
                return
            self._running = True
            warmup_at = self._clock() + timedelta(minutes=self._settings.warmup_delay_minutes)
            self._scheduler.add_job(
                self._scheduled_run,
                "date",
                run_date=warmup_at,
                id=WARMUP_JOB_ID,
                replace_existing=True,
                misfire_grace_time=300,
            )
            self._scheduler.add_job(
                self._scheduled_run,
                "interval",
                hours=self._settings.update_interval_hours,
                id=DAILY_JOB_ID,
                replace_existing=True,
                coalesce=True,
                misfire_grace_time=3600,
                max_instances=1,
            )
        logger.info("Scheduler started, daily updates enabled (warm-up at {})", warmup_at.isoformat())
        # a blocking scheduler does not return from start(), so it runs outside the lock
        if not self._scheduler.running:
            self._scheduler.start()

    def stop(self) -> None:
        with self._lock:
            for job_id in (DAILY_JOB_ID, WARMUP_JOB_ID):
                if self._scheduler.get_job(job_id) is not None:
                    self._scheduler.remove_job(job_id)
            self._running = False
        logger.info("Scheduler stopped")

    def shutdown(self) -> None:
        self.stop()
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def get_status(self) -> SchedulerStatusInfo:
        if not self._running:
            return SchedulerStatusInfo(running=False)
        fire_times = []
        for job_id in (WARMUP_JOB_ID, DAILY_JOB_ID):
            job = self._scheduler.get_job(job_id)
            next_run_time = getattr(job, "next_run_time", None) if job is not None else None
            if next_run_time is not None:
                fire_times.append(next_run_time)
        next_run = min(fire_times) if fire_times else self._clock() + self.interval
        return SchedulerStatusInfo(running=True, next_run=next_run)

    def _scheduled_run(self) -> None:
        if self._lease is not None:
            try:
                claimed = self._lease.claim(LEASE_NAME, self._clock(), self.interval)
            except Exception:  # noqa: BLE001
                logger.exception("Could not claim the daily update lease")
                return
            if not claimed:
                logger.info("Daily update already claimed by another instance, skipping")
                return

        self.run_daily_update()

        if self._lease is not None:
            try:
                self._lease.release(LEASE_NAME, SyncJobStatus.completed)
            except Exception:  # noqa: BLE001
                logger.exception("Could not release the daily update lease")

    def _load_domains(self) -> list[tuple[int, str]]:
        with self._session_factory() as session:
            stmt = select(TrackedDomain.id, TrackedDomain.domain).order_by(TrackedDomain.id)
            return [(row.id, row.domain) for row in session.execute(stmt)]

    def run_daily_update(self) -> None:
        logger.info("Starting daily update at {}", self._clock().isoformat())
        try:
            domains = self._load_domains()
            logger.info("Found {} domains to update", len(domains))
            for index, (domain_id, domain) in enumerate(domains):
                if index:
                    self._sleep(self._settings.pagespeed_delay_seconds)
                try:
                    self._update_domain(domain, domain_id)
                    logger.info("Updated data for {}", domain)
                except Exception:  # noqa: BLE001
                    logger.exception("Error updating {}", domain)
            logger.info("Daily update completed at {}", self._clock().isoformat())
        except Exception:  # noqa: BLE001
            logger.exception("Daily update failed")

    def _update_domain(self, domain: str, domain_id: int) -> dict[str, PageSpeedMetrics | None]:
        url = root_url(domain)
        results: dict[str, PageSpeedMetrics | None] = {}
        with self._session_factory() as session:
            for strategy in STRATEGIES:
                try:
                    results[strategy] = self._pagespeed.analyze_and_save(
                        session, domain_id, url, strategy
                    )
                except Exception:  # noqa: BLE001
                    session.rollback()
                    logger.exception("PageSpeed {} analysis failed for {}", strategy, domain)
                    results[strategy] = None
        return results

    def manual_update(self, domain: str, domain_id: int) -> dict[str, PageSpeedMetrics | None] | None:
        logger.info("Manual update requested for {}", domain)
        try:
            return self._update_domain(domain, domain_id)
        except Exception:  # noqa: BLE001
            logger.exception("PageSpeed update failed for {}", domain)
            return None


def run_forever(orchestrator: SyncOrchestrator) -> None:
    atexit.register(orchestrator.shutdown)
    orchestrator.start()

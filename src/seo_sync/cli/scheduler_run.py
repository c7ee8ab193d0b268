"""Run the daily sync scheduler in a dedicated process."""

from __future__ import annotations

from apscheduler.schedulers.blocking import BlockingScheduler

from seo_sync.config.logging import setup_logging
from seo_sync.config.settings import get_settings
from seo_sync.container import build_container
from seo_sync.worker.scheduler import run_forever


def main() -> None:
    settings = get_settings()
    setup_logging(settings)
    container = build_container(settings, scheduler=BlockingScheduler(timezone=settings.scheduler_tz))
    run_forever(container.orchestrator)


if __name__ == "__main__":
    main()

from __future__ import annotations

import time
from typing import Callable

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from seo_sync.config.settings import Settings
from seo_sync.db.models import TrackedDomain
from seo_sync.db.session import get_session
from seo_sync.parsers.pagespeed import parse_pagespeed
from seo_sync.providers.pagespeed import PageSpeedClient, Strategy
from seo_sync.schemas import PageSpeedMetrics, PageSpeedSyncResult
from seo_sync.services.history_service import HistoryService
from seo_sync.utils.clock import Clock, utc_now
from seo_sync.utils.urls import root_url


class PageSpeedService:
    def __init__(
        self,
        settings: Settings,
        client: PageSpeedClient,
        history: HistoryService | None = None,
        session_factory: Callable[[], Session] = get_session,
        clock: Clock = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._client = client
        self._history = history or HistoryService()
        self._session_factory = session_factory
        self._clock = clock
        self._sleep = sleep

    def fetch_page_speed_insights(self, url: str, strategy: Strategy = "mobile") -> PageSpeedMetrics:
        payload = self._client.run(url, strategy)
        return parse_pagespeed(payload)

    def analyze_and_save(
        self, session: Session, domain_id: int, url: str, strategy: Strategy = "mobile"
    ) -> PageSpeedMetrics:
        metrics = self.fetch_page_speed_insights(url, strategy)
        self._history.upsert_pagespeed_history(
            session, domain_id, url, strategy, self._clock(), metrics
        )
        session.commit()
        return metrics

    def sync(self, user_id: int) -> PageSpeedSyncResult:
        try:
            with self._session_factory() as session:
                domains = list(
                    session.execute(
                        select(TrackedDomain)
                        .where(TrackedDomain.user_id == user_id)
                        .order_by(TrackedDomain.id)
                    ).scalars()
                )
                urls_analyzed = 0
                for index, domain in enumerate(domains):
                    domain_id, domain_name = domain.id, domain.domain
                    if index:
                        self._sleep(self._settings.pagespeed_delay_seconds)
                    try:
                        self.analyze_and_save(session, domain_id, root_url(domain_name))
                        urls_analyzed += 1
                    except Exception:  # noqa: BLE001
                        session.rollback()
                        logger.exception("Error analyzing PageSpeed for {}", domain_name)
                return PageSpeedSyncResult(success=True, urls_analyzed=urls_analyzed)
        except Exception as exc:  # noqa: BLE001
            logger.exception("PageSpeed sync failed for user {}", user_id)
            return PageSpeedSyncResult(success=False, error=str(exc))

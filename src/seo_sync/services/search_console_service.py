from __future__ import annotations

from typing import Callable

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from seo_sync.config.settings import Settings
from seo_sync.db.models import TrackedDomain
from seo_sync.db.session import get_session
from seo_sync.providers.search_console import SearchConsoleClient
from seo_sync.schemas import SearchConsoleSyncResult
from seo_sync.services.history_service import HistoryService
from seo_sync.services.keyword_service import KeywordService
from seo_sync.services.token_service import TokenService
from seo_sync.utils.clock import Clock, utc_now
from seo_sync.utils.dates import trailing_window


class SearchConsoleSyncService:
    def __init__(
        self,
        settings: Settings,
        client: SearchConsoleClient,
        tokens: TokenService,
        keywords: KeywordService | None = None,
        history: HistoryService | None = None,
        session_factory: Callable[[], Session] = get_session,
        clock: Clock = utc_now,
    ) -> None:
        self._settings = settings
        self._client = client
        self._tokens = tokens
        self._keywords = keywords or KeywordService()
        self._history = history or HistoryService()
        self._session_factory = session_factory
        self._clock = clock

    def _domains_with_property(self, session: Session, user_id: int) -> list[TrackedDomain]:
        stmt = (
            select(TrackedDomain)
            .where(
                TrackedDomain.user_id == user_id,
                TrackedDomain.search_console_property.is_not(None),
                TrackedDomain.search_console_property != "",
            )
            .order_by(TrackedDomain.id)
        )
        return list(session.execute(stmt).scalars())

    def sync(self, user_id: int) -> SearchConsoleSyncResult:
        try:
            with self._session_factory() as session:
                return self._sync(session, user_id)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Search Console sync failed for user {}", user_id)
            return SearchConsoleSyncResult(success=False, error=str(exc))

    def _sync(self, session: Session, user_id: int) -> SearchConsoleSyncResult:
        domains = self._domains_with_property(session, user_id)
        if not domains:
            return SearchConsoleSyncResult(success=True)

        access_token = self._tokens.get_valid_access_token(session, user_id)
        start_date, end_date = trailing_window(
            self._clock().date(), self._settings.search_console_window_days
        )

        domains_updated = 0
        keywords_updated = 0
        for domain in domains:
            # detach what we need before a rollback expires the instance
            domain_id, domain_name, site_url = domain.id, domain.domain, domain.search_console_property
            try:
                performance = self._client.site_performance(access_token, site_url, start_date, end_date)
                self._history.upsert_domain_history(session, domain_id, end_date, performance)
                session.commit()
                domains_updated += 1

                rows = self._client.search_analytics(
                    access_token,
                    site_url,
                    start_date,
                    end_date,
                    dimensions=["query"],
                    row_limit=self._settings.search_console_row_limit,
                )
                processed = 0
                for row in rows:
                    if not row.keyword:
                        continue
                    keyword = self._keywords.get_or_create(session, domain_id, user_id, row.keyword)
                    self._history.upsert_keyword_history(session, keyword.id, end_date, row)
                    processed += 1
                session.commit()
                keywords_updated += processed
                logger.info(
                    "Synced Search Console data for {}: {} keyword rows", domain_name, processed
                )
            except Exception:  # noqa: BLE001
                session.rollback()
                logger.exception("Error syncing domain {}", domain_name)

        return SearchConsoleSyncResult(
            success=True, domains_updated=domains_updated, keywords_updated=keywords_updated
        )

    def list_properties(self, user_id: int) -> list[str]:
        with self._session_factory() as session:
            access_token = self._tokens.get_valid_access_token(session, user_id)
        return self._client.list_sites(access_token)

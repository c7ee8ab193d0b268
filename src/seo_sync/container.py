"""Wires settings, clients and services together - built once at process startup."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from seo_sync.config.settings import Settings, get_settings
from seo_sync.providers.google_oauth import GoogleOAuthClient
from seo_sync.providers.pagespeed import PageSpeedClient
from seo_sync.providers.search_console import SearchConsoleClient
from seo_sync.services.history_service import HistoryService
from seo_sync.services.keyword_service import KeywordService
from seo_sync.services.pagespeed_service import PageSpeedService
from seo_sync.services.search_console_service import SearchConsoleSyncService
from seo_sync.services.token_service import TokenService
from seo_sync.worker.lease import RunLease
from seo_sync.worker.scheduler import SchedulerPort, SyncOrchestrator


@dataclass
class Container:
    settings: Settings
    tokens: TokenService
    search_console: SearchConsoleSyncService
    pagespeed: PageSpeedService
    orchestrator: SyncOrchestrator


def build_container(
    settings: Settings | None = None, scheduler: SchedulerPort | None = None
) -> Container:
    settings = settings or get_settings()
    history = HistoryService()
    tokens = TokenService(GoogleOAuthClient(settings))
    search_console = SearchConsoleSyncService(
        settings,
        SearchConsoleClient(settings),
        tokens,
        keywords=KeywordService(),
        history=history,
    )
    pagespeed = PageSpeedService(settings, PageSpeedClient(settings), history=history)
    lease = None
    if settings.scheduler_lease_enabled:
        lease = RunLease(slack=timedelta(minutes=settings.scheduler_lease_slack_minutes))
    orchestrator = SyncOrchestrator(settings, pagespeed, scheduler=scheduler, lease=lease)
    return Container(
        settings=settings,
        tokens=tokens,
        search_console=search_console,
        pagespeed=pagespeed,
        orchestrator=orchestrator,
    )


def bootstrap(settings: Settings | None = None) -> Container:
    """Build the container; the scheduler starts on its own only in production."""
    container = build_container(settings)
    if container.settings.is_production:
        container.orchestrator.start()
    return container

from seo_sync.db.models.google_credential import GoogleCredential
from seo_sync.db.models.tracked_domain import TrackedDomain
from seo_sync.db.models.tracked_keyword import TrackedKeyword
from seo_sync.db.models.domain_history import DomainHistory
from seo_sync.db.models.keyword_history import KeywordHistory
from seo_sync.db.models.pagespeed_history import PageSpeedHistory
from seo_sync.db.models.sync_job import SyncJob, SyncJobStatus

__all__ = [
    "GoogleCredential",
    "TrackedDomain",
    "TrackedKeyword",
    "DomainHistory",
    "KeywordHistory",
    "PageSpeedHistory",
    "SyncJob",
    "SyncJobStatus",
]

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str | None = None
    expires_in: int
    token_type: str = "Bearer"


class SitePerformance(BaseModel):
    clicks: int = 0
    impressions: int = 0
    ctr: float = 0.0
    position: float = 0.0


class SearchAnalyticsRow(BaseModel):
    keys: list[str] = Field(default_factory=list)
    clicks: int = 0
    impressions: int = 0
    ctr: float = 0.0
    position: float = 0.0

    @property
    def keyword(self) -> str | None:
        return self.keys[0] if self.keys else None


class PageSpeedMetrics(_CamelModel):
    performance_score: int = 0
    accessibility_score: int = 0
    best_practices_score: int = 0
    seo_score: int = 0
    lcp: int = 0
    fid: int = 0
    cls: int = 0
    ttfb: int = 0
    fcp: int = 0
    speed_index: int = 0
    tbt: int = 0
    raw_data: dict[str, Any] = Field(default_factory=dict, exclude=True)


class AIReadabilityScore(_CamelModel):
    overall: int
    semantic_html: int = Field(alias="semanticHTML")
    schema_org: int
    content_clarity: int
    technical_seo: int = Field(alias="technicalSEO")


class SearchConsoleSyncResult(_CamelModel):
    success: bool
    domains_updated: int = 0
    keywords_updated: int = 0
    error: str | None = None


class PageSpeedSyncResult(_CamelModel):
    success: bool
    urls_analyzed: int = 0
    error: str | None = None


class SchedulerStatusInfo(_CamelModel):
    running: bool
    next_run: datetime | None = None

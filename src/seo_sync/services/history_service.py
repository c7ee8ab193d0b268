from __future__ import annotations

from datetime import date, datetime
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seo_sync.db.base import Base
from seo_sync.db.models import DomainHistory, KeywordHistory, PageSpeedHistory
from seo_sync.errors import PersistenceError
from seo_sync.schemas import PageSpeedMetrics, SearchAnalyticsRow, SitePerformance

ModelT = TypeVar("ModelT", bound=Base)


class HistoryService:
    """Writes one history row per entity and day; a rerun updates the row in place."""

    def _upsert(
        self,
        session: Session,
        model: type[ModelT],
        key: dict[str, Any],
        values: dict[str, Any],
    ) -> ModelT:
        try:
            stmt = select(model).filter_by(**key)
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                row = model(**key, **values)
            else:
                for name, value in values.items():
                    setattr(row, name, value)
            session.add(row)
            session.flush()
            return row
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to write {model.__tablename__}: {exc}") from exc

    def upsert_domain_history(
        self, session: Session, domain_id: int, day: date, performance: SitePerformance
    ) -> DomainHistory:
        return self._upsert(
            session,
            DomainHistory,
            {"domain_id": domain_id, "snapshot_date": day},
            {
                "total_clicks": performance.clicks,
                "total_impressions": performance.impressions,
                "avg_position": performance.position,
                "avg_ctr": performance.ctr,
            },
        )

    def upsert_keyword_history(
        self, session: Session, keyword_id: int, day: date, row: SearchAnalyticsRow
    ) -> KeywordHistory:
        return self._upsert(
            session,
            KeywordHistory,
            {"keyword_id": keyword_id, "snapshot_date": day},
            {
                "position": row.position,
                "clicks": row.clicks,
                "impressions": row.impressions,
                "ctr": row.ctr,
            },
        )

    def upsert_pagespeed_history(
        self,
        session: Session,
        domain_id: int,
        url: str,
        strategy: str,
        measured_at: datetime,
        metrics: PageSpeedMetrics,
    ) -> PageSpeedHistory:
        return self._upsert(
            session,
            PageSpeedHistory,
            {
                "domain_id": domain_id,
                "url": url,
                "strategy": strategy,
                "snapshot_date": measured_at.date(),
            },
            {
                "performance_score": metrics.performance_score,
                "accessibility_score": metrics.accessibility_score,
                "best_practices_score": metrics.best_practices_score,
                "seo_score": metrics.seo_score,
                "lcp": metrics.lcp,
                "fid": metrics.fid,
                "cls": metrics.cls,
                "ttfb": metrics.ttfb,
                "fcp": metrics.fcp,
                "speed_index": metrics.speed_index,
                "tbt": metrics.tbt,
                "raw_data": metrics.raw_data,
                "measured_at": measured_at,
            },
        )

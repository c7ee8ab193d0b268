from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from seo_sync.db.models import TrackedKeyword


class KeywordService:
    def get_or_create(
        self, session: Session, domain_id: int, user_id: int, keyword: str
    ) -> TrackedKeyword:
        row = (
            session.execute(
                select(TrackedKeyword)
                .where(TrackedKeyword.domain_id == domain_id, TrackedKeyword.keyword == keyword)
                .order_by(TrackedKeyword.id)
                .limit(1)
            )
            .scalars()
            .first()
        )
        if row:
            return row
        row = TrackedKeyword(user_id=user_id, domain_id=domain_id, keyword=keyword)
        session.add(row)
        session.flush()
        return row

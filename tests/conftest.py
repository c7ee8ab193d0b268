from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from seo_sync.config.settings import Settings
from seo_sync.db import models  # noqa: F401
from seo_sync.db.base import Base
from seo_sync.db.models import GoogleCredential, TrackedDomain

NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_handler)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "GOOGLE_CLIENT_ID": "client-id",
        "GOOGLE_CLIENT_SECRET": "client-secret",
        "HTTP_RETRIES": 3,
        "PAGESPEED_DELAY_SECONDS": 1.0,
        "SCHEDULER_LEASE_ENABLED": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def pagespeed_payload(
    performance: float = 0.9,
    accessibility: float = 0.8,
    best_practices: float = 0.95,
    seo: float = 1.0,
    lcp: float = 2100.4,
    cls: float = 0.05,
    fid: float | None = 40,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "lighthouseResult": {
            "categories": {
                "performance": {"score": performance},
                "accessibility": {"score": accessibility},
                "best-practices": {"score": best_practices},
                "seo": {"score": seo},
            },
            "audits": {
                "largest-contentful-paint": {"numericValue": lcp},
                "cumulative-layout-shift": {"numericValue": cls},
                "server-response-time": {"numericValue": 310.2},
                "first-contentful-paint": {"numericValue": 1200.6},
                "speed-index": {"numericValue": 1800},
                "total-blocking-time": {"numericValue": 150},
            },
        },
    }
    if fid is not None:
        payload["loadingExperience"] = {"metrics": {"FIRST_INPUT_DELAY_MS": {"percentile": fid}}}
    return payload


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    with session_factory() as session:
        yield session


def add_domain(
    session, user_id: int = 1, domain: str = "example.com", search_console_property: str | None = None
) -> TrackedDomain:
    row = TrackedDomain(user_id=user_id, domain=domain, search_console_property=search_console_property)
    session.add(row)
    session.commit()
    return row


def add_credential(
    session,
    user_id: int = 1,
    access_token: str | None = "cached-token",
    refresh_token: str | None = "refresh-token",
    token_expiry: datetime | None = None,
) -> GoogleCredential:
    row = GoogleCredential(
        user_id=user_id,
        access_token=access_token,
        refresh_token=refresh_token,
        token_expiry=token_expiry,
    )
    session.add(row)
    session.commit()
    return row

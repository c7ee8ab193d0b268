from __future__ import annotations

import threading
import time
from datetime import timedelta

import httpx
import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from seo_sync.db.base import Base
from seo_sync.db.models import GoogleCredential
from seo_sync.errors import ConfigurationError, NotConnectedError, UpstreamAPIError
from seo_sync.providers.google_oauth import GoogleOAuthClient
from seo_sync.schemas import TokenResponse
from seo_sync.services.token_service import TokenService

from conftest import NOW, RecordingTransport, add_credential, make_settings


def _token_endpoint(status_code: int = 200, body: dict | None = None) -> RecordingTransport:
    body = body or {"access_token": "fresh-token", "expires_in": 3600, "token_type": "Bearer"}

    def handler(request: httpx.Request) -> httpx.Response:
        if status_code != 200:
            return httpx.Response(status_code, text="invalid_grant")
        return httpx.Response(200, json=body)

    return RecordingTransport(handler)


def _service(settings, transport, clock) -> TokenService:
    return TokenService(GoogleOAuthClient(settings, transport=transport), clock=clock)


def test_cached_token_skips_network(session, settings, clock):
    add_credential(session, token_expiry=NOW + timedelta(minutes=10))
    transport = _token_endpoint()
    service = _service(settings, transport, clock)

    assert service.get_valid_access_token(session, 1) == "cached-token"
    assert transport.requests == []


@pytest.mark.parametrize(
    "expiry",
    [NOW - timedelta(seconds=1), NOW, None],
    ids=["expired", "expires-now", "no-expiry"],
)
def test_stale_token_refreshes_once(session, settings, clock, expiry):
    add_credential(session, token_expiry=expiry)
    transport = _token_endpoint()
    service = _service(settings, transport, clock)

    assert service.get_valid_access_token(session, 1) == "fresh-token"
    assert len(transport.requests) == 1
    form = dict(httpx.QueryParams(transport.requests[0].content.decode()))
    assert form["grant_type"] == "refresh_token"
    assert form["refresh_token"] == "refresh-token"

    row = session.execute(select(GoogleCredential)).scalar_one()
    assert row.access_token == "fresh-token"
    assert row.refresh_token == "refresh-token"

    # the persisted token is now served from cache
    assert service.get_valid_access_token(session, 1) == "fresh-token"
    assert len(transport.requests) == 1


def test_missing_access_token_refreshes(session, settings, clock):
    add_credential(session, access_token=None, token_expiry=NOW + timedelta(hours=1))
    transport = _token_endpoint()
    assert _service(settings, transport, clock).get_valid_access_token(session, 1) == "fresh-token"
    assert len(transport.requests) == 1


def test_refresh_sets_expiry_from_lifetime(session, settings, clock):
    add_credential(session, token_expiry=None)
    _service(settings, _token_endpoint(), clock).get_valid_access_token(session, 1)
    clock.advance(seconds=3599)
    transport = _token_endpoint()
    assert _service(settings, transport, clock).get_valid_access_token(session, 1) == "fresh-token"
    assert transport.requests == []


def test_rotated_refresh_token_is_stored(session, settings, clock):
    add_credential(session)
    transport = _token_endpoint(
        body={"access_token": "a2", "refresh_token": "r2", "expires_in": 60, "token_type": "Bearer"}
    )
    _service(settings, transport, clock).get_valid_access_token(session, 1)
    row = session.execute(select(GoogleCredential)).scalar_one()
    assert row.refresh_token == "r2"


def test_no_credential_row(session, settings, clock):
    with pytest.raises(NotConnectedError):
        _service(settings, _token_endpoint(), clock).get_valid_access_token(session, 42)


def test_no_refresh_token(session, settings, clock):
    add_credential(session, refresh_token=None, token_expiry=NOW + timedelta(hours=1))
    with pytest.raises(NotConnectedError):
        _service(settings, _token_endpoint(), clock).get_valid_access_token(session, 1)


def test_refresh_failure_propagates_without_retry(session, settings, clock):
    add_credential(session)
    transport = _token_endpoint(status_code=400)
    with pytest.raises(UpstreamAPIError) as excinfo:
        _service(settings, transport, clock).get_valid_access_token(session, 1)
    assert excinfo.value.status_code == 400
    assert "invalid_grant" in str(excinfo.value)
    assert len(transport.requests) == 1
    row = session.execute(select(GoogleCredential)).scalar_one()
    assert row.access_token == "cached-token"


def test_missing_client_credentials(session, clock):
    add_credential(session)
    settings = make_settings(GOOGLE_CLIENT_ID=None, GOOGLE_CLIENT_SECRET=None)
    with pytest.raises(ConfigurationError):
        _service(settings, _token_endpoint(), clock).get_valid_access_token(session, 1)


def test_save_tokens_overwrites_everything(session, settings, clock):
    add_credential(session, token_expiry=NOW + timedelta(days=1))
    service = _service(settings, _token_endpoint(), clock)
    service.save_tokens(session, 1, "new-access", "new-refresh", 120)
    row = session.execute(select(GoogleCredential)).scalar_one()
    assert (row.access_token, row.refresh_token) == ("new-access", "new-refresh")
    clock.advance(seconds=121)
    transport = _token_endpoint()
    assert _service(settings, transport, clock).get_valid_access_token(session, 1) == "fresh-token"


def test_save_tokens_creates_row(session, settings, clock):
    _service(settings, _token_endpoint(), clock).save_tokens(session, 7, "a", "r", 3600)
    assert session.execute(select(GoogleCredential.user_id)).scalar_one() == 7


def test_connect_exchanges_code(session, settings, clock):
    transport = _token_endpoint(
        body={"access_token": "a", "refresh_token": "r", "expires_in": 3600, "token_type": "Bearer"}
    )
    service = _service(settings, transport, clock)
    service.connect(session, 3, "auth-code", "https://app.example.com/callback")
    form = dict(httpx.QueryParams(transport.requests[0].content.decode()))
    assert form["grant_type"] == "authorization_code"
    assert form["code"] == "auth-code"
    assert service.get_valid_access_token(session, 3) == "a"


def test_authorization_url_requests_offline_access(settings, clock):
    url = _service(settings, _token_endpoint(), clock).authorization_url("https://app.example.com/cb")
    params = httpx.URL(url).params
    assert params["access_type"] == "offline"
    assert params["prompt"] == "consent"
    assert "webmasters.readonly" in params["scope"]


class _SlowOAuth:
    def __init__(self) -> None:
        self.calls = 0

    def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        self.calls += 1
        time.sleep(0.05)
        return TokenResponse(access_token=f"token-{self.calls}", expires_in=3600)


def test_concurrent_callers_share_one_refresh(tmp_path, clock):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'tokens.sqlite3'}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    with factory() as session:
        add_credential(session, token_expiry=NOW - timedelta(minutes=1))

    oauth = _SlowOAuth()
    service = TokenService(oauth, clock=clock)
    results: list[str] = []
    barrier = threading.Barrier(4)

    def worker() -> None:
        barrier.wait()
        with factory() as session:
            results.append(service.get_valid_access_token(session, 1))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    engine.dispose()

    assert oauth.calls == 1
    assert results == ["token-1"] * 4


def test_refresh_locks_are_shared_while_held_and_then_dropped(session, settings, clock):
    add_credential(session, token_expiry=None)
    service = _service(settings, _token_endpoint(), clock)

    held = service._lock_for(1)
    assert service._lock_for(1) is held
    assert service._lock_for(2) is not held
    del held

    assert service.get_valid_access_token(session, 1) == "fresh-token"
    assert len(service._locks) == 0

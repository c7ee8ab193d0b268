from __future__ import annotations

import threading
import weakref
from datetime import timedelta

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from seo_sync.db.models import GoogleCredential
from seo_sync.errors import NotConnectedError
from seo_sync.providers.google_oauth import GoogleOAuthClient
from seo_sync.utils.clock import Clock, as_utc, utc_now


class TokenService:
    """Hands out valid Google access tokens, refreshing them when they expire.

    Refreshes are serialized per user: the credential is re-read after the
    user's lock is acquired, so a caller that waited on another caller's
    refresh picks up the fresh token instead of refreshing again.
    """

    def __init__(self, oauth_client: GoogleOAuthClient, clock: Clock = utc_now) -> None:
        self._oauth = oauth_client
        self._clock = clock
        # entries vanish once no caller holds the lock
        self._locks: weakref.WeakValueDictionary[int, threading.Lock] = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _lock_for(self, user_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock

    def _load(self, session: Session, user_id: int) -> GoogleCredential | None:
        stmt = (
            select(GoogleCredential)
            .where(GoogleCredential.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return session.execute(stmt).scalar_one_or_none()

    def _cached_token(self, credential: GoogleCredential) -> str | None:
        if credential.access_token and credential.token_expiry:
            if as_utc(credential.token_expiry) > self._clock():
                return credential.access_token
        return None

    def get_valid_access_token(self, session: Session, user_id: int) -> str:
        credential = self._load(session, user_id)
        if not credential or not credential.refresh_token:
            raise NotConnectedError(user_id)
        cached = self._cached_token(credential)
        if cached:
            return cached

        with self._lock_for(user_id):
            credential = self._load(session, user_id)
            if not credential or not credential.refresh_token:
                raise NotConnectedError(user_id)
            cached = self._cached_token(credential)
            if cached:
                return cached

            logger.info("Refreshing Google access token for user {}", user_id)
            tokens = self._oauth.refresh_access_token(credential.refresh_token)
            credential.access_token = tokens.access_token
            credential.token_expiry = self._clock() + timedelta(seconds=tokens.expires_in)
            if tokens.refresh_token:
                credential.refresh_token = tokens.refresh_token
            session.add(credential)
            session.commit()
            return tokens.access_token

    def save_tokens(
        self,
        session: Session,
        user_id: int,
        access_token: str,
        refresh_token: str,
        expires_in: int,
    ) -> GoogleCredential:
        credential = self._load(session, user_id)
        if not credential:
            credential = GoogleCredential(user_id=user_id)
        credential.access_token = access_token
        credential.refresh_token = refresh_token
        credential.token_expiry = self._clock() + timedelta(seconds=expires_in)
        session.add(credential)
        session.commit()
        return credential

    def authorization_url(self, redirect_uri: str) -> str:
        return self._oauth.authorization_url(redirect_uri)

    def connect(self, session: Session, user_id: int, code: str, redirect_uri: str) -> GoogleCredential:
        tokens = self._oauth.exchange_code(code, redirect_uri)
        refresh_token = tokens.refresh_token
        if not refresh_token:
            existing = self._load(session, user_id)
            refresh_token = existing.refresh_token if existing else None
        if not refresh_token:
            raise NotConnectedError(user_id)
        logger.info("Connected Google account for user {}", user_id)
        return self.save_tokens(session, user_id, tokens.access_token, refresh_token, tokens.expires_in)

from __future__ import annotations

from urllib.parse import urlencode

import httpx

from seo_sync.config.settings import Settings
from seo_sync.errors import ConfigurationError, UpstreamAPIError
from seo_sync.schemas import TokenResponse

SCOPES = (
    "https://www.googleapis.com/auth/webmasters.readonly",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
)


class GoogleOAuthClient:
    """Talks to Google's OAuth token endpoint. Calls are never retried."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    def _client_credentials(self) -> tuple[str, str]:
        client_id = self._settings.google_client_id
        client_secret = self._settings.google_client_secret
        if not client_id or not client_secret:
            raise ConfigurationError("Google OAuth credentials not configured")
        return client_id, client_secret

    def authorization_url(self, redirect_uri: str) -> str:
        client_id = self._settings.google_client_id
        if not client_id:
            raise ConfigurationError("GOOGLE_CLIENT_ID is not configured")
        params = {
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{self._settings.google_auth_url}?{urlencode(params)}"

    def _post_token(self, data: dict[str, str], action: str) -> TokenResponse:
        timeout = httpx.Timeout(self._settings.http_timeout)
        with httpx.Client(timeout=timeout, transport=self._transport) as client:
            response = client.post(self._settings.google_token_url, data=data)
            if not response.is_success:
                raise UpstreamAPIError(f"Failed to {action}", response.status_code, response.text)
            return TokenResponse.model_validate(response.json())

    def exchange_code(self, code: str, redirect_uri: str) -> TokenResponse:
        client_id, client_secret = self._client_credentials()
        return self._post_token(
            {
                "code": code,
                "client_id": client_id,
                "client_secret": client_secret,
                "redirect_uri": redirect_uri,
                "grant_type": "authorization_code",
            },
            "exchange code for tokens",
        )

    def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        client_id, client_secret = self._client_credentials()
        return self._post_token(
            {
                "refresh_token": refresh_token,
                "client_id": client_id,
                "client_secret": client_secret,
                "grant_type": "refresh_token",
            },
            "refresh token",
        )

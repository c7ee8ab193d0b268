from __future__ import annotations

from typing import Any

import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from seo_sync.config.settings import Settings
from seo_sync.errors import UpstreamAPIError


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, UpstreamAPIError):
        return exc.retriable
    return isinstance(exc, httpx.TransportError)


class GoogleAPIClient:
    """Shared request plumbing for the Google measurement APIs."""

    error_label = "Google API error"

    def __init__(
        self,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
        wait: wait_base | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._retrying = Retrying(
            stop=stop_after_attempt(max(1, settings.http_retries)),
            wait=wait or wait_exponential(multiplier=1, min=1, max=8),
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )

    def _client(self) -> httpx.Client:
        timeout = httpx.Timeout(self._settings.http_timeout)
        return httpx.Client(timeout=timeout, transport=self._transport)

    def _send(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        with self._client() as client:
            response = client.request(method, url, **kwargs)
            if not response.is_success:
                raise UpstreamAPIError(self.error_label, response.status_code, response.text)
            return response.json()

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        return self._retrying(self._send, method, url, **kwargs)

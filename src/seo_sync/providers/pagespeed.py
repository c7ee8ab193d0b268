from __future__ import annotations

from typing import Any, Literal

from seo_sync.parsers.pagespeed import CATEGORIES
from seo_sync.providers.base import GoogleAPIClient

Strategy = Literal["mobile", "desktop"]


class PageSpeedClient(GoogleAPIClient):
    error_label = "PageSpeed API error"

    def run(self, url: str, strategy: Strategy = "mobile") -> dict[str, Any]:
        params: list[tuple[str, str]] = [("url", url), ("strategy", strategy)]
        params.extend(("category", category) for category in CATEGORIES)
        if self._settings.pagespeed_api_key:
            params.append(("key", self._settings.pagespeed_api_key))
        return self._request("GET", self._settings.pagespeed_base_url, params=params)

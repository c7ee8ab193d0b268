from __future__ import annotations

from datetime import date
from typing import Any
from urllib.parse import quote

from seo_sync.parsers.search_console import parse_rows, parse_site_list, parse_site_performance
from seo_sync.providers.base import GoogleAPIClient
from seo_sync.schemas import SearchAnalyticsRow, SitePerformance


class SearchConsoleClient(GoogleAPIClient):
    error_label = "Search Console API error"

    def _headers(self, access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    def query(
        self,
        access_token: str,
        site_url: str,
        start_date: date,
        end_date: date,
        dimensions: list[str] | None = None,
        row_limit: int | None = None,
    ) -> dict[str, Any]:
        url = (
            f"{self._settings.search_console_base_url.rstrip('/')}"
            f"/sites/{quote(site_url, safe='')}/searchAnalytics/query"
        )
        payload: dict[str, Any] = {
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
            "dataState": "final",
        }
        if dimensions:
            payload["dimensions"] = dimensions
        if row_limit:
            payload["rowLimit"] = row_limit
        return self._request("POST", url, headers=self._headers(access_token), json=payload)

    def site_performance(
        self, access_token: str, site_url: str, start_date: date, end_date: date
    ) -> SitePerformance:
        return parse_site_performance(self.query(access_token, site_url, start_date, end_date))

    def search_analytics(
        self,
        access_token: str,
        site_url: str,
        start_date: date,
        end_date: date,
        dimensions: list[str] | None = None,
        row_limit: int = 1000,
    ) -> list[SearchAnalyticsRow]:
        payload = self.query(
            access_token,
            site_url,
            start_date,
            end_date,
            dimensions=dimensions or ["query", "page"],
            row_limit=row_limit,
        )
        return parse_rows(payload)

    def list_sites(self, access_token: str) -> list[str]:
        url = f"{self._settings.webmasters_base_url.rstrip('/')}/sites"
        payload = self._request("GET", url, headers={"Authorization": f"Bearer {access_token}"})
        return parse_site_list(payload)

from __future__ import annotations

from typing import Any

from seo_sync.schemas import SearchAnalyticsRow, SitePerformance


def parse_rows(payload: dict[str, Any]) -> list[SearchAnalyticsRow]:
    rows = payload.get("rows") or []
    if not isinstance(rows, list):
        return []
    results: list[SearchAnalyticsRow] = []
    for item in rows:
        if not isinstance(item, dict):
            continue
        results.append(
            SearchAnalyticsRow(
                keys=[str(key) for key in item.get("keys") or []],
                clicks=int(item.get("clicks") or 0),
                impressions=int(item.get("impressions") or 0),
                ctr=float(item.get("ctr") or 0),
                position=float(item.get("position") or 0),
            )
        )
    return results


def parse_site_performance(payload: dict[str, Any]) -> SitePerformance:
    rows = parse_rows(payload)
    if not rows:
        return SitePerformance()
    first = rows[0]
    return SitePerformance(
        clicks=first.clicks,
        impressions=first.impressions,
        ctr=first.ctr,
        position=first.position,
    )


def parse_site_list(payload: dict[str, Any]) -> list[str]:
    entries = payload.get("siteEntry") or []
    return [str(entry["siteUrl"]) for entry in entries if isinstance(entry, dict) and entry.get("siteUrl")]

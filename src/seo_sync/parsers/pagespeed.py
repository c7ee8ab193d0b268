from __future__ import annotations

from typing import Any

from seo_sync.schemas import PageSpeedMetrics
from seo_sync.utils.numbers import clamp, round_half_up

CATEGORIES = ("performance", "accessibility", "best-practices", "seo")


def _category_score(categories: dict[str, Any], name: str) -> int:
    score = (categories.get(name) or {}).get("score") or 0
    return clamp(round_half_up(float(score) * 100))


def _audit_value(audits: dict[str, Any], name: str) -> float:
    audit = audits.get(name) or {}
    return float(audit.get("numericValue") or 0)


def _field_percentile(payload: dict[str, Any], metric: str) -> float | None:
    metrics = (payload.get("loadingExperience") or {}).get("metrics") or {}
    value = (metrics.get(metric) or {}).get("percentile")
    return float(value) if value is not None else None


def parse_pagespeed(payload: dict[str, Any]) -> PageSpeedMetrics:
    lighthouse = payload.get("lighthouseResult") or {}
    categories = lighthouse.get("categories") or {}
    audits = lighthouse.get("audits") or {}

    # FID is field data only; fall back to the lab audit when the field block is missing
    fid = _field_percentile(payload, "FIRST_INPUT_DELAY_MS")
    if fid is None:
        fid = _audit_value(audits, "first-input-delay")

    return PageSpeedMetrics(
        performance_score=_category_score(categories, "performance"),
        accessibility_score=_category_score(categories, "accessibility"),
        best_practices_score=_category_score(categories, "best-practices"),
        seo_score=_category_score(categories, "seo"),
        lcp=round_half_up(_audit_value(audits, "largest-contentful-paint")),
        fid=round_half_up(fid),
        cls=round_half_up(_audit_value(audits, "cumulative-layout-shift") * 1000),
        ttfb=round_half_up(_audit_value(audits, "server-response-time")),
        fcp=round_half_up(_audit_value(audits, "first-contentful-paint")),
        speed_index=round_half_up(_audit_value(audits, "speed-index")),
        tbt=round_half_up(_audit_value(audits, "total-blocking-time")),
        raw_data=payload,
    )

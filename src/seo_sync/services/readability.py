from __future__ import annotations

from seo_sync.schemas import AIReadabilityScore, PageSpeedMetrics
from seo_sync.utils.numbers import clamp, round_half_up


def _bucket(value: int, good: int, needs_improvement: int) -> int:
    if value <= good:
        return 100
    if value <= needs_improvement:
        return 75
    return 50


def calculate_ai_readability_score(metrics: PageSpeedMetrics) -> AIReadabilityScore:
    """Blend the Lighthouse category scores and Core Web Vitals into a 0-100 score.

    No I/O. Category scores are expected in [0, 100] and timings to be
    non-negative; every component is clamped to [0, 100].
    """
    accessibility = metrics.accessibility_score
    seo = metrics.seo_score
    best_practices = metrics.best_practices_score
    performance = metrics.performance_score

    semantic_html = clamp(round_half_up(accessibility * 0.6 + seo * 0.4))
    schema_org = clamp(round_half_up(seo * 0.7 + best_practices * 0.3))
    content_clarity = clamp(round_half_up(accessibility * 0.5 + performance * 0.3 + seo * 0.2))

    lcp_score = _bucket(metrics.lcp, 2500, 4000)
    cls_score = _bucket(metrics.cls, 100, 250)
    fid_score = _bucket(metrics.fid, 100, 300)
    technical_seo = clamp(round_half_up((lcp_score + cls_score + fid_score) / 3))

    overall = clamp(
        round_half_up(
            semantic_html * 0.3
            + schema_org * 0.25
            + content_clarity * 0.25
            + technical_seo * 0.2
        )
    )
    return AIReadabilityScore(
        overall=overall,
        semantic_html=semantic_html,
        schema_org=schema_org,
        content_clarity=content_clarity,
        technical_seo=technical_seo,
    )

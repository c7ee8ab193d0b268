from seo_sync.parsers.pagespeed import parse_pagespeed
from seo_sync.parsers.search_console import parse_rows, parse_site_list, parse_site_performance

from conftest import pagespeed_payload


def test_scores_are_scaled_to_percent():
    metrics = parse_pagespeed(pagespeed_payload(performance=0.906, accessibility=0.8))
    assert metrics.performance_score == 91
    assert metrics.accessibility_score == 80
    assert metrics.best_practices_score == 95
    assert metrics.seo_score == 100


def test_vitals_are_rounded_and_cls_scaled():
    metrics = parse_pagespeed(pagespeed_payload(lcp=2100.4, cls=0.123, fid=42))
    assert metrics.lcp == 2100
    assert metrics.cls == 123
    assert metrics.fid == 42
    assert metrics.ttfb == 310
    assert metrics.fcp == 1201
    assert metrics.speed_index == 1800
    assert metrics.tbt == 150


def test_missing_sections_default_to_zero():
    metrics = parse_pagespeed({})
    assert metrics.model_dump(exclude={"raw_data"}) == {
        "performance_score": 0,
        "accessibility_score": 0,
        "best_practices_score": 0,
        "seo_score": 0,
        "lcp": 0,
        "fid": 0,
        "cls": 0,
        "ttfb": 0,
        "fcp": 0,
        "speed_index": 0,
        "tbt": 0,
    }


def test_fid_falls_back_to_lab_audit():
    payload = pagespeed_payload(fid=None)
    payload["lighthouseResult"]["audits"]["first-input-delay"] = {"numericValue": 77}
    assert parse_pagespeed(payload).fid == 77


def test_null_category_score_is_zero():
    payload = pagespeed_payload()
    payload["lighthouseResult"]["categories"]["seo"]["score"] = None
    assert parse_pagespeed(payload).seo_score == 0


def test_raw_payload_is_kept_but_not_serialized():
    payload = pagespeed_payload()
    metrics = parse_pagespeed(payload)
    assert metrics.raw_data is payload
    assert "rawData" not in metrics.to_dict()


def test_site_performance_defaults_when_no_rows():
    perf = parse_site_performance({})
    assert (perf.clicks, perf.impressions, perf.ctr, perf.position) == (0, 0, 0.0, 0.0)


def test_site_performance_uses_first_row():
    perf = parse_site_performance(
        {"rows": [{"clicks": 12.0, "impressions": 340, "ctr": 0.035, "position": 8.2}]}
    )
    assert perf.clicks == 12
    assert perf.impressions == 340
    assert perf.ctr == 0.035
    assert perf.position == 8.2


def test_rows_skip_garbage_and_fill_missing_fields():
    rows = parse_rows({"rows": [{"keys": ["seo tools"], "clicks": 3}, "oops", {"keys": []}]})
    assert len(rows) == 2
    assert rows[0].keyword == "seo tools"
    assert rows[0].impressions == 0
    assert rows[1].keyword is None


def test_site_list():
    payload = {"siteEntry": [{"siteUrl": "sc-domain:example.com"}, {"permissionLevel": "siteOwner"}]}
    assert parse_site_list(payload) == ["sc-domain:example.com"]

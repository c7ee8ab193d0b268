"""Quick one-off PageSpeed Insights query."""

from __future__ import annotations

import argparse
import json

from seo_sync.config.settings import get_settings
from seo_sync.providers.pagespeed import PageSpeedClient
from seo_sync.services.pagespeed_service import PageSpeedService
from seo_sync.services.readability import calculate_ai_readability_score


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run one PageSpeed analysis and print JSON")
    parser.add_argument("--url", required=True, help="Page URL")
    parser.add_argument("--strategy", choices=["mobile", "desktop"], default="mobile")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    settings = get_settings()
    service = PageSpeedService(settings, PageSpeedClient(settings))
    metrics = service.fetch_page_speed_insights(args.url, args.strategy)
    payload = {
        "metrics": metrics.to_dict(),
        "aiReadability": calculate_ai_readability_score(metrics).to_dict(),
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()

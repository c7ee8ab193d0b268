"""On-demand Search Console / PageSpeed sync for one user."""

from __future__ import annotations

import argparse
import json

from seo_sync.config.logging import setup_logging
from seo_sync.config.settings import get_settings
from seo_sync.container import build_container


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync Search Console and PageSpeed data now")
    parser.add_argument("--user-id", type=int, required=True, help="User whose domains to sync")
    parser.add_argument(
        "--source",
        choices=["search-console", "pagespeed", "all"],
        default="all",
        help="Which data source to sync",
    )
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings, to_file=False)
    container = build_container(settings)

    output = {}
    if args.source in {"search-console", "all"}:
        output["searchConsole"] = container.search_console.sync(args.user_id).to_dict()
    if args.source in {"pagespeed", "all"}:
        output["pagespeed"] = container.pagespeed.sync(args.user_id).to_dict()
    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()

"""Helper functions for ingest_articles CLI."""

from __future__ import annotations

import argparse
import logging

from common.cli_helpers import add_common_args, positive_int
from pulse_store.models import Source

logger = logging.getLogger(__name__)


def select_sources(sources: list[Source], value: str | None) -> list[Source]:
    '''Filter enabled sources by the --sources argument (names, case-insensitive).'''

    # If no value is provided or if "all" is specified, keep all sources
    if not value or value.strip().lower() == "all":
        return sources

    by_name = {source.name.lower(): source for source in sources}
    requested = [s.strip().lower() for s in value.split(",") if s.strip()]

    # Log any unknown sources
    for name in requested:
        if name not in by_name:
            logger.warning("Unknown or disabled source: %s", name)

    selected = [by_name[name] for name in requested if name in by_name]

    if not selected:
        raise ValueError(f"No valid sources provided. Enabled sources: {', '.join(sorted(by_name))}")

    return selected


def parse_ingest_articles_args() -> argparse.Namespace:
    '''Parse CLI arguments for ingest_articles.'''

    parser = argparse.ArgumentParser(description="Ingest enabled feed sources into raw articles")
    add_common_args(parser)
    parser.add_argument(
        "--sources",
        default=None,
        help="Comma-separated list of source names (default: all enabled).",
    )
    parser.add_argument(
        "--recency-months",
        type=positive_int,
        default=None,
        help="Reject entries older than this many months (default: from config)",
    )
    parser.add_argument(
        "--fetch-full-text",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Fetch full article text when the feed text is short (default: from config)",
    )
    parser.add_argument("--load-local", action="store_true", help="Save results to local file")
    return parser.parse_args()

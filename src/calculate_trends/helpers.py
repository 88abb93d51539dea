"""Helper functions for calculate_trends CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_common_args, positive_int


def parse_calculate_trends_args() -> argparse.Namespace:
    """Parse CLI arguments for calculate_trends."""

    parser = argparse.ArgumentParser(description="Recompute trending topics and onboarding interests")
    add_common_args(parser)
    parser.add_argument(
        "--lookback-hours",
        type=positive_int,
        default=None,
        help="Aggregate tags of articles processed in this window (default: from config)",
    )
    parser.add_argument(
        "--top-trending",
        type=positive_int,
        default=None,
        help="Number of trending topics to keep (default: from config)",
    )
    parser.add_argument(
        "--top-onboarding",
        type=positive_int,
        default=None,
        help="Number of onboarding interests to keep (default: from config)",
    )
    parser.add_argument(
        "--keep-stale-topics",
        action="store_true",
        help="Do not delete trending topics missing from this run",
    )
    parser.add_argument("--load-local", action="store_true", help="Save results to local file")
    return parser.parse_args()

"""Helper functions for personalize_feed CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_common_args, positive_int


def parse_personalize_feed_args() -> argparse.Namespace:
    """Parse CLI arguments for personalize_feed."""

    parser = argparse.ArgumentParser(description="Print the personalized feed of one user")
    add_common_args(parser)
    parser.add_argument("--user-id", required=True, help="Profile id of the user")
    parser.add_argument(
        "--limit",
        type=positive_int,
        default=None,
        help="Number of articles in the feed (default: from config)",
    )
    parser.add_argument("--load-local", action="store_true", help="Save results to local file")
    return parser.parse_args()

"""Helper functions for process_articles CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_common_args, positive_int


def parse_process_articles_args() -> argparse.Namespace:
    """Parse CLI arguments for process_articles."""

    parser = argparse.ArgumentParser(description="Extract insights and score pending raw articles")
    add_common_args(parser)

    # Batch options
    parser.add_argument(
        "--batch-size",
        type=positive_int,
        default=None,
        help="Number of pending articles to process (default: from config)",
    )
    parser.add_argument(
        "--batches",
        type=positive_int,
        default=1,
        help="Number of consecutive batches to run (default: 1)",
    )

    # Model options
    parser.add_argument(
        "--model",
        default=None,
        help="OpenAI chat model (default: from config)",
    )

    # Output options
    parser.add_argument("--load-local", action="store_true", help="Save results to local file")

    return parser.parse_args()

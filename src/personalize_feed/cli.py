"""CLI for building one user's personalized feed."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import save_jsonl_records_local
from personalize_feed.helpers import parse_personalize_feed_args
from personalize_feed.personalize_feed import get_personalized_feed
from pulse_store.connection import get_session

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_personalize_feed_args()
    setup_logging(args.log_level)

    config = load_config(args.config).feed

    with get_session() as session:
        feed = get_personalized_feed(
            session,
            args.user_id,
            candidate_limit=config.candidate_limit,
            feed_limit=args.limit or config.feed_limit,
            interest_boost=config.interest_boost,
            user_type_bonus=config.user_type_bonus,
            summary_min_chars=config.summary_min_chars,
            default_summary_style=config.default_summary_style,
        )

    if not feed:
        logger.warning("Feed is empty")
        return

    for position, article in enumerate(feed, start=1):
        logger.info("  %2d. %.2f | %s | %s", position, article.personalized_score, article.title, article.source_name)

    if args.load_local:
        save_jsonl_records_local(feed, "personalized_feed")


if __name__ == "__main__":
    main()
